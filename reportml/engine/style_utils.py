"""Color utilities for template rendering.

This module converts the color strings templates use on line elements
(named colors and hex notation) to 0-255 RGB tuples for the canvas.
"""

import logging

logger = logging.getLogger(__name__)

NAMED_COLORS: dict[str, tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "lightgray": (211, 211, 211),
    "darkgray": (169, 169, 169),
    "yellow": (255, 255, 0),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to an RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#1a1a1a" or "#1a1")

    Returns:
        RGB tuple with values 0-255

    Raises:
        ValueError: If the string is not 3 or 6 hex digits
    """
    hex_color = hex_color.lstrip("#")

    # Handle 3-digit hex colors
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)

    if len(hex_color) != 6:
        raise ValueError(f"Hex color must have 3 or 6 digits, got {hex_color!r}")

    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)

    return (r, g, b)


def parse_color(color: str) -> tuple[int, int, int]:
    """Parse a named or hex color.

    Unrecognized colors fall back to black with a warning rather than
    failing the document.

    Args:
        color: Color name (e.g., "lightgray") or hex string (e.g., "#cc0000")

    Returns:
        RGB tuple with values 0-255
    """
    name = color.strip().lower()
    if name in NAMED_COLORS:
        return NAMED_COLORS[name]

    if name.startswith("#"):
        try:
            return hex_to_rgb(name)
        except ValueError as e:
            logger.warning(f"Invalid hex color '{color}': {e}. Using black.")
            return (0, 0, 0)

    logger.warning(f"Unknown color '{color}'. Using black.")
    return (0, 0, 0)

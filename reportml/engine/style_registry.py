"""Named style lookup and application.

The registry indexes a report's style definitions by name and applies them
to a canvas. Style effects persist on the canvas until another style or
explicit state change overrides them.
"""

import logging
from typing import Iterable

from reportml.engine.canvas import ReportCanvas
from reportml.models.styles import Style

logger = logging.getLogger(__name__)

DEFAULT_LINE_HEIGHT = 6.0


class StyleRegistry:
    """Index of style definitions keyed by name.

    A later definition with the same name replaces an earlier one.
    """

    def __init__(self, styles: Iterable[Style] | None = None) -> None:
        self._styles: dict[str, Style] = {}
        for style in styles or []:
            self._styles[style.name] = style

    def __len__(self) -> int:
        return len(self._styles)

    def __contains__(self, name: object) -> bool:
        return name in self._styles

    def get(self, name: str) -> Style | None:
        """Return the style registered under ``name``, or None."""
        if not name:
            return None
        return self._styles.get(name)

    def line_height(self, name: str, default: float = DEFAULT_LINE_HEIGHT) -> float:
        """Return the style's line height, or ``default`` if unset or unknown."""
        style = self.get(name)
        if style is None or style.line_height <= 0:
            return default
        return style.line_height

    def apply(self, name: str, canvas: ReportCanvas) -> None:
        """Apply a named style to the canvas.

        Sets the font if the style names a family, then the text color and
        fill color if they are set. An empty or unknown name leaves the
        canvas untouched.

        Args:
            name: Style name, may be empty
            canvas: Canvas to modify
        """
        if not name:
            return
        style = self._styles.get(name)
        if style is None:
            logger.debug(f"Style '{name}' is not defined, keeping current canvas state")
            return

        if style.font_family:
            canvas.set_font(style.font_family, style.font_style, style.font_size)
        if style.text_color is not None:
            canvas.set_text_color(*style.text_color.to_rgb())
        if style.fill_color is not None:
            canvas.set_fill_color(*style.fill_color.to_rgb())

    def clear(self) -> None:
        self._styles.clear()

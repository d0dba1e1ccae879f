"""Font, style and color models.

This module defines the Pydantic models for reusable style bundles and the
custom fonts a template declares.

Example:
    ```python
    from reportml.models.styles import RGBColor, Style

    style = Style(
        name="title",
        font_family="Helvetica",
        font_style="B",
        font_size=18,
        text_color=RGBColor(r=26, g=26, b=26),
        line_height=10,
    )
    ```
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Alignment = Literal["L", "C", "R"]

_ALIGNMENT_ALIASES = {
    "l": "L",
    "left": "L",
    "c": "C",
    "center": "C",
    "centre": "C",
    "r": "R",
    "right": "R",
}


def normalize_alignment(value: str | None) -> str | None:
    """Map an alignment attribute to ``L``, ``C`` or ``R``.

    Args:
        value: Alignment as written in the template (e.g. "C", "center")

    Returns:
        Normalized alignment letter, or None if unset

    Raises:
        ValueError: If the alignment is not recognized
    """
    if value is None or not value.strip():
        return None
    normalized = _ALIGNMENT_ALIASES.get(value.strip().lower())
    if normalized is None:
        raise ValueError(f"Unknown alignment '{value}', expected L, C or R")
    return normalized


class RGBColor(BaseModel):
    """An explicit color as three 0-255 intensity components."""

    model_config = {"extra": "forbid", "frozen": True}

    r: int = Field(default=0, ge=0, le=255)
    g: int = Field(default=0, ge=0, le=255)
    b: int = Field(default=0, ge=0, le=255)

    def to_rgb(self) -> tuple[int, int, int]:
        """Return the color as an ``(r, g, b)`` tuple."""
        return self.r, self.g, self.b


class Font(BaseModel):
    """A custom TrueType font loaded from a file when the document starts.

    Attributes:
        name: Logical name used in log messages
        family: Family name styles refer to via ``fontFamily``
        style: Font style flags ("", "B", "I" or "BI")
        file: Path to the .ttf file, relative paths resolve against font_dir
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(default="", description="Logical font name")
    family: str = Field(..., min_length=1, description="Font family name")
    style: str = Field(default="", description="Font style flags")
    file: str = Field(..., min_length=1, description="Path to the font file")

    @field_validator("style")
    @classmethod
    def validate_style(cls, value: str) -> str:
        """Normalize style flags to an ordered subset of "BI"."""
        flags = value.upper()
        unknown = set(flags) - {"B", "I"}
        if unknown:
            raise ValueError(f"Font style may only contain B and I, got {value!r}")
        return ("B" if "B" in flags else "") + ("I" if "I" in flags else "")


class Style(BaseModel):
    """A named, reusable bundle of font, color and alignment attributes.

    Attributes:
        name: Unique style name; a later definition with the same name wins
        font_family: Font family, leaves the canvas font untouched if empty
        font_style: Style flags passed with the family ("B", "I", "U")
        font_size: Size in points, 0 keeps the current size
        text_color: Text color, None leaves the canvas text color unchanged
        fill_color: Fill color, None leaves the canvas fill color unchanged
        align: Default alignment for text elements using this style
        line_height: Line height in document units, 0 means "use the default"
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(..., min_length=1, description="Style name")
    font_family: str = Field(default="", description="Font family")
    font_style: str = Field(default="", description="Font style flags")
    font_size: float = Field(default=0.0, ge=0.0, description="Font size in points")
    text_color: RGBColor | None = Field(default=None, description="Text color")
    fill_color: RGBColor | None = Field(default=None, description="Fill color")
    align: Alignment | None = Field(default=None, description="Default alignment")
    line_height: float = Field(default=0.0, ge=0.0, description="Line height")

    @field_validator("align", mode="before")
    @classmethod
    def validate_align(cls, value: str | None) -> str | None:
        return normalize_alignment(value)

"""Document configuration models.

This module defines the page geometry models (document, margins, custom
size) and the header/footer blocks rendered on every page.

Example:
    ```python
    from reportml.models.document import Document, Margins

    document = Document(
        orientation="landscape",
        unit="mm",
        format="A4",
        margins=Margins(top=20, right=15, bottom=20, left=15),
    )
    ```
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from reportml.models.elements import DecorationElement

DEFAULT_ORIENTATION = "portrait"
DEFAULT_UNIT = "mm"
DEFAULT_FORMAT = "A4"
DEFAULT_MARGIN = 15.0
DEFAULT_HEADER_FOOTER_HEIGHT = 15.0

SUPPORTED_UNITS = ("mm", "cm", "pt", "in")


class Margins(BaseModel):
    """Page margins in document units."""

    model_config = {"extra": "forbid", "frozen": True}

    top: float = Field(default=0.0, ge=0.0)
    right: float = Field(default=0.0, ge=0.0)
    bottom: float = Field(default=0.0, ge=0.0)
    left: float = Field(default=0.0, ge=0.0)


class CustomSize(BaseModel):
    """Custom page dimensions in document units, overriding the format."""

    model_config = {"extra": "forbid", "frozen": True}

    width: float = Field(..., gt=0.0)
    height: float = Field(..., gt=0.0)


class Document(BaseModel):
    """Page setup for the whole report.

    Fields left as None are filled in by the parser's defaulting step, after
    which orientation, unit, format and margins are always populated.

    Attributes:
        orientation: "portrait" or "landscape"
        unit: Measurement unit for every coordinate in the template
        format: Named page format (A3, A4, A5, Letter, Legal, Tabloid)
        margins: Page margins
        custom_size: Optional explicit page size
    """

    model_config = {"extra": "forbid", "frozen": True}

    orientation: Literal["portrait", "landscape"] | None = Field(default=None)
    unit: Literal["mm", "cm", "pt", "in"] | None = Field(default=None)
    format: str | None = Field(default=None)
    margins: Margins | None = Field(default=None)
    custom_size: CustomSize | None = Field(default=None)

    @field_validator("orientation", mode="before")
    @classmethod
    def validate_orientation(cls, value: str | None) -> str | None:
        """Accept "P"/"L" shorthands alongside the full names."""
        if value is None or not value.strip():
            return None
        lowered = value.strip().lower()
        if lowered in ("p", "portrait"):
            return "portrait"
        if lowered in ("l", "landscape"):
            return "landscape"
        raise ValueError(f"Unknown orientation '{value}'")

    @field_validator("unit", mode="before")
    @classmethod
    def validate_unit(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        lowered = value.strip().lower()
        if lowered == "inch":
            lowered = "in"
        if lowered not in SUPPORTED_UNITS:
            raise ValueError(f"Unknown unit '{value}', expected one of {SUPPORTED_UNITS}")
        return lowered

    @field_validator("format", mode="before")
    @classmethod
    def validate_format(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class HeaderFooter(BaseModel):
    """Shared shape of the header and footer blocks.

    Attributes:
        enabled: Whether the block is drawn at all
        height: Block height; the footer is drawn this far above the page bottom
        elements: Text, image and line elements in declared order
    """

    model_config = {"extra": "forbid", "frozen": True}

    enabled: bool = Field(default=False)
    height: float = Field(default=0.0, ge=0.0)
    elements: list[DecorationElement] = Field(default_factory=list)


class Header(HeaderFooter):
    """Page header drawn when each page starts."""


class Footer(HeaderFooter):
    """Page footer drawn when each page ends."""

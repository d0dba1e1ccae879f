"""Element models for report sections, headers and footers.

Every element kind is a separate Pydantic model carrying a ``kind`` literal,
and ``Element`` is the discriminated union over all of them. Sections keep
their children in a single ``list[Element]`` so the order in which elements
were declared survives across kinds.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from reportml.models.styles import Alignment, RGBColor, normalize_alignment


class BaseElement(BaseModel):
    """Attributes shared by all elements.

    Attributes:
        condition: Condition expression carried from the template (not evaluated)
        spacing_after: Vertical space added after the element, in document units
    """

    model_config = {"extra": "forbid", "frozen": True}

    condition: str = Field(default="", description="Condition expression")
    spacing_after: float = Field(default=0.0, ge=0.0, description="Trailing spacing")


class TextElement(BaseElement):
    """A run of text, optionally positioned and wrapped.

    ``x`` and ``y`` are None when the template does not give them. Negative
    values are measured from the right and bottom page edges.
    """

    kind: Literal["text"] = "text"
    content: str = Field(default="", description="Text, may contain placeholders")
    style: str = Field(default="", description="Style name")
    x: float | None = Field(default=None, description="Absolute x position")
    y: float | None = Field(default=None, description="Absolute y position")
    width: float = Field(default=0.0, ge=0.0, description="Wrap width, 0 for a single line")
    align: Alignment | None = Field(default=None, description="Text alignment")
    wrap: bool = Field(default=False, description="Wrap across the full content width")

    @field_validator("align", mode="before")
    @classmethod
    def validate_align(cls, value: str | None) -> str | None:
        return normalize_alignment(value)


class ImageElement(BaseElement):
    """A placed image. A zero width or height keeps the aspect ratio."""

    kind: Literal["image"] = "image"
    path: str = Field(..., min_length=1, description="Image path, may contain placeholders")
    x: float | None = Field(default=None, description="Absolute x position")
    y: float = Field(default=0.0, description="Absolute y position, 0 for the cursor")
    width: float = Field(default=0.0, ge=0.0, description="Image width")
    height: float = Field(default=0.0, ge=0.0, description="Image height")
    align: Alignment | None = Field(default=None, description="Horizontal alignment")

    @field_validator("align", mode="before")
    @classmethod
    def validate_align(cls, value: str | None) -> str | None:
        return normalize_alignment(value)


class TableColumn(BaseModel):
    """A table column definition.

    Attributes:
        header: Header label
        field: Key looked up in each row record
        width: Column width, 0 shares the remaining content width
        align: Cell alignment (default: left)
        format: Value format kind ("", "number", "currency", "percent")
    """

    model_config = {"extra": "forbid", "frozen": True}

    header: str = Field(default="", description="Header label")
    field: str = Field(default="", description="Row field name")
    width: float = Field(default=0.0, ge=0.0, description="Column width")
    align: Alignment | None = Field(default=None, description="Cell alignment")
    format: str = Field(default="", description="Value format kind")

    @field_validator("align", mode="before")
    @classmethod
    def validate_align(cls, value: str | None) -> str | None:
        return normalize_alignment(value)


class TableElement(BaseElement):
    """A table whose rows come from a list of records in the data context."""

    kind: Literal["table"] = "table"
    data_source: str = Field(default="", description="Data-source reference")
    header_style: str = Field(default="", description="Header row style name")
    cell_style: str = Field(default="", description="Data row style name")
    border: bool = Field(default=False, description="Draw borders around data cells")
    alternate_row_color: RGBColor | None = Field(
        default=None,
        description="Fill color for even-indexed rows",
    )
    row_height: float = Field(default=7.0, gt=0.0, description="Row height")
    columns: list[TableColumn] = Field(default_factory=list, description="Columns in order")


class ListElement(BaseElement):
    """A bulleted list of strings taken from the data context."""

    kind: Literal["list"] = "list"
    items: str = Field(default="", description="Data-source reference")
    style: str = Field(default="", description="Style name")
    bullet: str = Field(default="", description="Bullet glyph, default bullet if empty")
    indent: float = Field(default=0.0, ge=0.0, description="Indent, 0 for the default")


class KeyValueItem(BaseModel):
    """A key label and a value that may contain placeholders."""

    model_config = {"extra": "forbid", "frozen": True}

    key: str = Field(default="", description="Key label")
    value: str = Field(default="", description="Value, may contain placeholders")


class KeyValueListElement(BaseElement):
    """Two-column key/value rows."""

    kind: Literal["keyValueList"] = "keyValueList"
    style: str = Field(default="", description="Style name")
    key_width: float = Field(default=0.0, ge=0.0, description="Key column width, 0 for the default")
    value_width: float = Field(default=0.0, ge=0.0, description="Value column width, 0 to the margin")
    value_align: Alignment | None = Field(default=None, description="Value alignment")
    items: list[KeyValueItem] = Field(default_factory=list, description="Items in order")

    @field_validator("value_align", mode="before")
    @classmethod
    def validate_value_align(cls, value: str | None) -> str | None:
        return normalize_alignment(value)


class LineElement(BaseElement):
    """A straight line between two points."""

    kind: Literal["line"] = "line"
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    color: str = Field(default="", description="Named or hex color, unchanged if empty")
    width: float = Field(default=0.0, ge=0.0, description="Line width, unchanged if 0")


class RectangleElement(BaseElement):
    """A rectangle with optional rounded corners, fill and border."""

    kind: Literal["rectangle"] = "rectangle"
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)
    radius: float = Field(default=0.0, ge=0.0, description="Corner radius")
    fill_color: RGBColor | None = Field(default=None, description="Fill color")
    border_color: RGBColor | None = Field(default=None, description="Border color")
    border_width: float = Field(default=0.0, ge=0.0, description="Border width, unchanged if 0")


class PageBreakElement(BaseModel):
    """An explicit page break."""

    model_config = {"extra": "forbid", "frozen": True}

    kind: Literal["pageBreak"] = "pageBreak"
    condition: str = Field(default="", description="Condition expression")
    spacing_after: float = Field(default=0.0, ge=0.0)


Element = Annotated[
    Union[
        TextElement,
        ImageElement,
        TableElement,
        ListElement,
        KeyValueListElement,
        LineElement,
        RectangleElement,
        PageBreakElement,
    ],
    Field(discriminator="kind"),
]

# Kinds allowed inside header and footer blocks.
DecorationElement = Annotated[
    Union[TextElement, ImageElement, LineElement],
    Field(discriminator="kind"),
]

ELEMENT_KINDS: tuple[str, ...] = (
    "text",
    "image",
    "table",
    "list",
    "keyValueList",
    "line",
    "rectangle",
    "pageBreak",
)

"""Report root model.

This module defines the Report model, the root of a parsed template, along
with its sections and metadata.

Example:
    ```python
    from reportml.models.elements import TextElement
    from reportml.models.report import Report, Section

    report = Report(
        sections=[
            Section(
                name="intro",
                elements=[TextElement(content="{{ .Title }}", style="title")],
            )
        ]
    )
    ```
"""

from pydantic import BaseModel, Field

from reportml.models.document import Document, Footer, Header
from reportml.models.elements import Element
from reportml.models.styles import Font, Style


class Metadata(BaseModel):
    """Descriptive template metadata, written to the PDF document info."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str = ""
    description: str = ""
    author: str = ""
    created: str = ""
    modified: str = ""


class Section(BaseModel):
    """A content section and its elements in declared order.

    ``condition``, ``loop`` and ``loop_variable`` are carried from the
    template so callers can inspect them; the engine renders every section
    exactly once regardless of their values.

    Attributes:
        name: Section name, used in error messages
        page_break_before: Start a new page before the first element
        page_break_after: Start a new page after the last element
        condition: Condition expression (not evaluated)
        loop: Loop data-source expression (not evaluated)
        loop_variable: Loop variable name (not evaluated)
        elements: Elements of all kinds in declared order
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = ""
    page_break_before: bool = False
    page_break_after: bool = False
    condition: str = ""
    loop: str = ""
    loop_variable: str = ""
    elements: list[Element] = Field(default_factory=list)


class Report(BaseModel):
    """Root of a parsed report template.

    Attributes:
        version: Template format version from the root element
        metadata: Optional descriptive metadata
        document: Page setup
        fonts: Custom fonts to register at initialization
        styles: Style definitions, indexed by the style registry
        header: Optional page header
        footer: Optional page footer
        sections: Sections in declared order
    """

    model_config = {"extra": "forbid", "frozen": True}

    version: str = ""
    metadata: Metadata | None = None
    document: Document = Field(default_factory=Document)
    fonts: list[Font] = Field(default_factory=list)
    styles: list[Style] = Field(default_factory=list)
    header: Header | None = None
    footer: Footer | None = None
    sections: list[Section] = Field(default_factory=list)

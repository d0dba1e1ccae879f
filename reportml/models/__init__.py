"""Template object model.

This package contains the Pydantic models a parsed template is made of:
- Report, Section, Metadata: the template root and its sections
- Document, Margins, CustomSize, Header, Footer: page setup
- Font, Style, RGBColor: fonts and reusable styles
- Element and its variants: the drawable section children
"""

from reportml.models.document import CustomSize, Document, Footer, Header, Margins
from reportml.models.elements import (
    Element,
    ImageElement,
    KeyValueItem,
    KeyValueListElement,
    LineElement,
    ListElement,
    PageBreakElement,
    RectangleElement,
    TableColumn,
    TableElement,
    TextElement,
)
from reportml.models.report import Metadata, Report, Section
from reportml.models.styles import Font, RGBColor, Style

__all__ = [
    "Report",
    "Section",
    "Metadata",
    "Document",
    "Margins",
    "CustomSize",
    "Header",
    "Footer",
    "Font",
    "Style",
    "RGBColor",
    "Element",
    "TextElement",
    "ImageElement",
    "TableElement",
    "TableColumn",
    "ListElement",
    "KeyValueListElement",
    "KeyValueItem",
    "LineElement",
    "RectangleElement",
    "PageBreakElement",
]

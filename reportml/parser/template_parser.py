"""XML template parser.

This module decodes report templates into the ``Report`` model. Section,
header and footer children are decoded one at a time in document order,
branching on each child's tag, so the resulting element lists keep the order
in which elements were declared regardless of their kind.

Example:
    ```python
    from reportml.parser.template_parser import parse_template_string

    report = parse_template_string('''
        <report version="1.0">
          <sections>
            <section name="intro">
              <text style="title">{{ .Title }}</text>
              <line x1="15" y1="30" x2="-15" y2="30"/>
            </section>
          </sections>
        </report>
    ''')
    ```
"""

import logging
from pathlib import Path
from typing import Any, Callable

from lxml import etree
from pydantic import BaseModel, ValidationError

from reportml.exceptions.template_parse_error import TemplateParseError
from reportml.models.document import (
    DEFAULT_FORMAT,
    DEFAULT_HEADER_FOOTER_HEIGHT,
    DEFAULT_MARGIN,
    DEFAULT_ORIENTATION,
    DEFAULT_UNIT,
    CustomSize,
    Document,
    Footer,
    Header,
    Margins,
)
from reportml.models.elements import (
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

logger = logging.getLogger(__name__)

ROOT_TAG = "report"

_BASE_ATTRS = {"condition": "condition", "spacingAfter": "spacing_after"}

_TEXT_ATTRS = {
    **_BASE_ATTRS,
    "style": "style",
    "x": "x",
    "y": "y",
    "width": "width",
    "align": "align",
    "wrap": "wrap",
}
_IMAGE_ATTRS = {
    **_BASE_ATTRS,
    "path": "path",
    "x": "x",
    "y": "y",
    "width": "width",
    "height": "height",
    "align": "align",
}
_TABLE_ATTRS = {
    **_BASE_ATTRS,
    "dataSource": "data_source",
    "headerStyle": "header_style",
    "cellStyle": "cell_style",
    "border": "border",
    "rowHeight": "row_height",
}
_COLUMN_ATTRS = {
    "header": "header",
    "field": "field",
    "width": "width",
    "align": "align",
    "format": "format",
}
_LIST_ATTRS = {
    **_BASE_ATTRS,
    "items": "items",
    "style": "style",
    "bullet": "bullet",
    "indent": "indent",
}
_KEY_VALUE_LIST_ATTRS = {
    **_BASE_ATTRS,
    "style": "style",
    "keyWidth": "key_width",
    "valueWidth": "value_width",
    "valueAlign": "value_align",
}
_LINE_ATTRS = {
    **_BASE_ATTRS,
    "x1": "x1",
    "y1": "y1",
    "x2": "x2",
    "y2": "y2",
    "color": "color",
    "width": "width",
}
_RECTANGLE_ATTRS = {
    **_BASE_ATTRS,
    "x": "x",
    "y": "y",
    "width": "width",
    "height": "height",
    "radius": "radius",
    "borderWidth": "border_width",
}
_SECTION_ATTRS = {
    "name": "name",
    "pageBreakBefore": "page_break_before",
    "pageBreakAfter": "page_break_after",
    "condition": "condition",
    "loop": "loop",
    "loopVariable": "loop_variable",
}
_FONT_ATTRS = {"name": "name", "family": "family", "style": "style", "file": "file"}
_STYLE_CHILDREN = {
    "fontFamily": "font_family",
    "fontStyle": "font_style",
    "fontSize": "font_size",
    "align": "align",
    "lineHeight": "line_height",
}
_METADATA_CHILDREN = ("name", "description", "author", "created", "modified")


def parse_template(path: str | Path) -> Report:
    """Read and parse a template file.

    Args:
        path: Path to the XML template

    Returns:
        Parsed report with defaults applied

    Raises:
        TemplateParseError: If the file cannot be read or is malformed
    """
    template_path = Path(path)
    try:
        data = template_path.read_bytes()
    except OSError as e:
        raise TemplateParseError(
            f"Failed to read template file {template_path}: {e}",
            context={"path": str(template_path)},
        ) from e
    return parse_template_bytes(data)


def parse_template_string(text: str) -> Report:
    """Parse a template held in a string."""
    return parse_template_bytes(text.encode("utf-8"))


def parse_template_bytes(data: bytes) -> Report:
    """Parse raw template bytes into a Report.

    Args:
        data: XML document bytes

    Returns:
        Parsed report with defaults applied

    Raises:
        TemplateParseError: If the XML is malformed or an element carries
            invalid attribute values
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        raise TemplateParseError(
            f"Failed to parse template XML: {e.msg}",
            context={"line": e.lineno},
        ) from e

    root_tag = _local_name(root)
    if root_tag != ROOT_TAG:
        raise TemplateParseError(
            f"Template root element must be <{ROOT_TAG}>, got <{root_tag}>",
            context={"element": root_tag, "line": root.sourceline},
        )

    fields: dict[str, Any] = {"version": root.get("version", "")}
    sections: list[Section] = []
    for child in _children(root):
        tag = _local_name(child)
        if tag == "metadata":
            fields["metadata"] = _parse_metadata(child)
        elif tag == "document":
            fields["document"] = _parse_document(child)
        elif tag == "fonts":
            fields["fonts"] = [
                _build(Font, font, _attributes(font, _FONT_ATTRS))
                for font in _children(child)
                if _local_name(font) == "font"
            ]
        elif tag == "styles":
            fields["styles"] = [
                _parse_style(style) for style in _children(child) if _local_name(style) == "style"
            ]
        elif tag == "header":
            fields["header"] = _parse_header_footer(Header, child)
        elif tag == "footer":
            fields["footer"] = _parse_header_footer(Footer, child)
        elif tag == "sections":
            sections.extend(
                _parse_section(section) for section in _children(child) if _local_name(section) == "section"
            )
        elif tag == "section":
            sections.append(_parse_section(child))
        else:
            logger.debug(f"Skipping unknown template element <{tag}> at line {child.sourceline}")
    fields["sections"] = sections

    report = _build(Report, root, fields)
    return apply_defaults(report)


def apply_defaults(report: Report) -> Report:
    """Fill in document and header/footer defaults.

    Orientation defaults to portrait, unit to mm, format to A4 and margins to
    15 on every side. A header or footer that is present with a zero height
    gets a height of 15.

    Args:
        report: Report as decoded from the template

    Returns:
        Report with defaults applied
    """
    document = report.document
    document_updates: dict[str, Any] = {}
    if document.orientation is None:
        document_updates["orientation"] = DEFAULT_ORIENTATION
    if document.unit is None:
        document_updates["unit"] = DEFAULT_UNIT
    if document.format is None:
        document_updates["format"] = DEFAULT_FORMAT
    if document.margins is None:
        document_updates["margins"] = Margins(
            top=DEFAULT_MARGIN,
            right=DEFAULT_MARGIN,
            bottom=DEFAULT_MARGIN,
            left=DEFAULT_MARGIN,
        )

    updates: dict[str, Any] = {}
    if document_updates:
        updates["document"] = document.model_copy(update=document_updates)
    if report.header is not None and report.header.height == 0:
        updates["header"] = report.header.model_copy(update={"height": DEFAULT_HEADER_FOOTER_HEIGHT})
    if report.footer is not None and report.footer.height == 0:
        updates["footer"] = report.footer.model_copy(update={"height": DEFAULT_HEADER_FOOTER_HEIGHT})

    return report.model_copy(update=updates) if updates else report


def _parse_metadata(node: etree._Element) -> Metadata:
    fields = {}
    for child in _children(node):
        tag = _local_name(child)
        if tag in _METADATA_CHILDREN:
            fields[tag] = _text_of(child)
    return _build(Metadata, node, fields)


def _parse_document(node: etree._Element) -> Document:
    fields: dict[str, Any] = _attributes(node, {"orientation": "orientation", "unit": "unit", "format": "format"})
    for child in _children(node):
        tag = _local_name(child)
        if tag == "margins":
            fields["margins"] = _build(
                Margins,
                child,
                _attributes(child, {"top": "top", "right": "right", "bottom": "bottom", "left": "left"}),
            )
        elif tag == "customSize":
            fields["custom_size"] = _build(
                CustomSize,
                child,
                _attributes(child, {"width": "width", "height": "height"}),
            )
    return _build(Document, node, fields)


def _parse_style(node: etree._Element) -> Style:
    fields: dict[str, Any] = _attributes(node, {"name": "name"})
    for child in _children(node):
        tag = _local_name(child)
        if tag in _STYLE_CHILDREN:
            value = _text_of(child)
            if value:
                fields[_STYLE_CHILDREN[tag]] = value
        elif tag == "textColor":
            fields["text_color"] = _parse_color(child)
        elif tag == "fillColor":
            fields["fill_color"] = _parse_color(child)
    return _build(Style, node, fields)


def _parse_color(node: etree._Element) -> RGBColor:
    return _build(RGBColor, node, _attributes(node, {"r": "r", "g": "g", "b": "b"}))


def _parse_header_footer(model: type[Header] | type[Footer], node: etree._Element) -> Header | Footer:
    fields: dict[str, Any] = _attributes(node, {"enabled": "enabled", "height": "height"})
    elements = []
    for child in _children(node):
        tag = _local_name(child)
        builder = _DECORATION_BUILDERS.get(tag)
        if builder is None:
            logger.debug(f"Skipping <{tag}> inside <{_local_name(node)}> at line {child.sourceline}")
            continue
        elements.append(builder(child))
    fields["elements"] = elements
    return _build(model, node, fields)


def _parse_section(node: etree._Element) -> Section:
    fields: dict[str, Any] = _attributes(node, _SECTION_ATTRS)
    elements = []
    for child in _children(node):
        tag = _local_name(child)
        builder = _ELEMENT_BUILDERS.get(tag)
        if builder is None:
            logger.debug(
                f"Skipping unknown element <{tag}> in section '{fields.get('name', '')}' "
                f"at line {child.sourceline}"
            )
            continue
        elements.append(builder(child))
    fields["elements"] = elements
    return _build(Section, node, fields)


def _parse_text(node: etree._Element) -> TextElement:
    fields = _attributes(node, _TEXT_ATTRS)
    fields["content"] = "".join(node.itertext()).strip()
    return _build(TextElement, node, fields)


def _parse_image(node: etree._Element) -> ImageElement:
    return _build(ImageElement, node, _attributes(node, _IMAGE_ATTRS))


def _parse_table(node: etree._Element) -> TableElement:
    fields: dict[str, Any] = _attributes(node, _TABLE_ATTRS)
    columns: list[TableColumn] = []
    for child in _children(node):
        tag = _local_name(child)
        if tag == "alternateRowColor":
            fields["alternate_row_color"] = _parse_color(child)
        elif tag == "columns":
            columns.extend(
                _build(TableColumn, column, _attributes(column, _COLUMN_ATTRS))
                for column in _children(child)
                if _local_name(column) == "column"
            )
    fields["columns"] = columns
    return _build(TableElement, node, fields)


def _parse_list(node: etree._Element) -> ListElement:
    return _build(ListElement, node, _attributes(node, _LIST_ATTRS))


def _parse_key_value_list(node: etree._Element) -> KeyValueListElement:
    fields: dict[str, Any] = _attributes(node, _KEY_VALUE_LIST_ATTRS)
    fields["items"] = [
        _build(KeyValueItem, item, {"key": item.get("key", ""), "value": item.get("value", "")})
        for item in _children(node)
        if _local_name(item) == "item"
    ]
    return _build(KeyValueListElement, node, fields)


def _parse_line(node: etree._Element) -> LineElement:
    return _build(LineElement, node, _attributes(node, _LINE_ATTRS))


def _parse_rectangle(node: etree._Element) -> RectangleElement:
    fields: dict[str, Any] = _attributes(node, _RECTANGLE_ATTRS)
    for child in _children(node):
        tag = _local_name(child)
        if tag == "fillColor":
            fields["fill_color"] = _parse_color(child)
        elif tag == "borderColor":
            fields["border_color"] = _parse_color(child)
        elif tag == "borderWidth":
            value = _text_of(child)
            if value:
                fields["border_width"] = value
    return _build(RectangleElement, node, fields)


def _parse_page_break(node: etree._Element) -> PageBreakElement:
    return _build(PageBreakElement, node, _attributes(node, {"condition": "condition"}))


_ELEMENT_BUILDERS: dict[str, Callable[[etree._Element], BaseModel]] = {
    "text": _parse_text,
    "image": _parse_image,
    "table": _parse_table,
    "list": _parse_list,
    "keyValueList": _parse_key_value_list,
    "line": _parse_line,
    "rectangle": _parse_rectangle,
    "pageBreak": _parse_page_break,
}

_DECORATION_BUILDERS: dict[str, Callable[[etree._Element], BaseModel]] = {
    "text": _parse_text,
    "image": _parse_image,
    "line": _parse_line,
}


def _children(node: etree._Element) -> list[etree._Element]:
    """Return element children in document order, without comments or PIs."""
    return [child for child in node if isinstance(child.tag, str)]


def _local_name(node: etree._Element) -> str:
    return etree.QName(node).localname


def _text_of(node: etree._Element) -> str:
    return (node.text or "").strip()


def _attributes(node: etree._Element, mapping: dict[str, str]) -> dict[str, Any]:
    """Collect non-empty attributes, renamed to model field names."""
    values: dict[str, Any] = {}
    for xml_name, field_name in mapping.items():
        raw = node.get(xml_name)
        if raw is None or not raw.strip():
            continue
        values[field_name] = raw.strip()
    return values


def _build(model: type, node: etree._Element, fields: dict[str, Any]) -> Any:
    """Construct a model, reporting validation failures against the XML node."""
    try:
        return model(**fields)
    except ValidationError as e:
        tag = _local_name(node)
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or tag}: {error['msg']}"
            for error in e.errors()
        )
        raise TemplateParseError(
            f"Invalid <{tag}> at line {node.sourceline}: {problems}",
            context={"element": tag, "line": node.sourceline},
        ) from e

"""Per-kind element renderers.

``ElementRenderer`` turns each template element into drawing operations on
a ``ReportCanvas``. Dispatch goes through a fixed table keyed on the
element's ``kind``; every renderer reads the style registry and the data
binder and moves the canvas cursor as its element requires.
"""

import logging
from typing import Any, Callable

from reportml.config import Config
from reportml.engine.binding import DataBinder
from reportml.engine.canvas import ReportCanvas
from reportml.engine.formatting import format_value
from reportml.engine.style_registry import DEFAULT_LINE_HEIGHT, StyleRegistry
from reportml.engine.style_utils import parse_color
from reportml.exceptions import GenerationError
from reportml.models.elements import (
    ImageElement,
    KeyValueListElement,
    LineElement,
    ListElement,
    PageBreakElement,
    RectangleElement,
    TableElement,
    TextElement,
)

logger = logging.getLogger(__name__)

DEFAULT_BULLET = "•"
DEFAULT_LIST_INDENT = 10.0
BULLET_WIDTH = 10.0
DEFAULT_KEY_WIDTH = 50.0


class ElementRenderer:
    """Renders template elements onto a canvas.

    Attributes:
        canvas: Target canvas
        styles: Style registry of the current report
        binder: Data binder holding the data context
        config: Configuration used for asset paths and currency formatting
    """

    def __init__(
        self,
        canvas: ReportCanvas,
        styles: StyleRegistry,
        binder: DataBinder,
        config: Config,
    ) -> None:
        self.canvas = canvas
        self.styles = styles
        self.binder = binder
        self.config = config
        self._dispatch: dict[str, Callable[[Any], None]] = {
            "text": self.render_text,
            "image": self.render_image,
            "table": self.render_table,
            "list": self.render_list,
            "keyValueList": self.render_key_value_list,
            "line": self.render_line,
            "rectangle": self.render_rectangle,
            "pageBreak": self.render_page_break,
        }

    def render(self, element: Any) -> None:
        """Render one element with the renderer registered for its kind.

        Raises:
            GenerationError: If no renderer exists for the element's kind
        """
        kind = getattr(element, "kind", None)
        handler = self._dispatch.get(kind)
        if handler is None:
            raise GenerationError(
                f"No renderer for element kind '{kind}'",
                element=str(kind),
            )
        handler(element)

    def _resolve_x(self, x: float) -> float:
        return x if x >= 0 else self.canvas.page_size[0] + x

    def _resolve_y(self, y: float) -> float:
        return y if y >= 0 else self.canvas.page_size[1] + y

    def _spacing(self, amount: float) -> None:
        if amount > 0:
            self.canvas.ln(amount)

    def render_text(self, element: TextElement) -> None:
        """Draw a text element.

        The position is absolute when x and/or y are given, otherwise the
        text flows from the cursor. A width or the wrap flag produces a
        wrapped block; anything else is a single line across the page.
        """
        canvas = self.canvas
        self.styles.apply(element.style, canvas)
        content = self.binder.resolve(element.content)

        if element.x is not None and element.y is not None:
            canvas.set_xy(self._resolve_x(element.x), self._resolve_y(element.y))
        elif element.y is not None:
            canvas.set_y(self._resolve_y(element.y))
        elif element.x is not None:
            canvas.set_x(self._resolve_x(element.x))

        style = self.styles.get(element.style)
        align = element.align or (style.align if style is not None else None) or "L"
        line_height = self.styles.line_height(element.style, DEFAULT_LINE_HEIGHT)

        if element.width > 0 or element.wrap:
            canvas.multi_cell(element.width, line_height, content, align=align)
        else:
            canvas.cell(0, line_height, content, ln=1, align=align)

        self._spacing(element.spacing_after)

    def render_image(self, element: ImageElement) -> None:
        """Place an image and move the cursor below it."""
        canvas = self.canvas
        path = self.config.resolve_image_path(self.binder.resolve(element.path))
        left, _, right, _ = canvas.margins
        page_width = canvas.page_size[0]

        if element.align == "C":
            x = left + (page_width - left - right - element.width) / 2
        elif element.align == "R":
            x = page_width - right - element.width
        elif element.x is None:
            x = left
        else:
            x = self._resolve_x(element.x)

        y = canvas.get_y() if element.y == 0 else self._resolve_y(element.y)

        placed = canvas.image(path, x, y, element.width, element.height)
        if placed is None:
            return
        canvas.set_y(y + placed[1])
        self._spacing(element.spacing_after)

    def render_table(self, element: TableElement) -> None:
        """Draw a table header and one row per record in the data source.

        A missing or non-list data source leaves only the header row.
        """
        canvas = self.canvas
        widths = self._column_widths(element)

        self.styles.apply(element.header_style, canvas)
        fill_header = bool(element.header_style)
        for column, width in zip(element.columns, widths):
            canvas.cell(width, element.row_height, column.header, "1", 0, "C", fill_header)
        canvas.ln()

        rows = self.binder.lookup(element.data_source)
        if not isinstance(rows, list):
            if rows is None:
                logger.warning(f"Table data source '{element.data_source}' not found in data")
            else:
                logger.warning(
                    f"Table data source '{element.data_source}' is a "
                    f"{type(rows).__name__}, expected a list"
                )
            self._spacing(element.spacing_after)
            return

        border = "1" if element.border else ""
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                logger.debug(f"Skipping non-record row {index} in '{element.data_source}'")
                continue
            self.styles.apply(element.cell_style, canvas)
            fill = False
            if element.alternate_row_color is not None and index % 2 == 0:
                canvas.set_fill_color(*element.alternate_row_color.to_rgb())
                fill = True
            for column, width in zip(element.columns, widths):
                text = format_value(row.get(column.field), column.format, self.config.currency_symbol)
                canvas.cell(width, element.row_height, text, border, 0, column.align or "L", fill)
            canvas.ln()

        self._spacing(element.spacing_after)

    def _column_widths(self, element: TableElement) -> list[float]:
        fixed = sum(column.width for column in element.columns)
        flexible = sum(1 for column in element.columns if column.width <= 0)
        share = 0.0
        if flexible:
            share = max(self.canvas.content_width - fixed, 0.0) / flexible
        return [column.width if column.width > 0 else share for column in element.columns]

    def render_list(self, element: ListElement) -> None:
        """Draw one bulleted line per string item in the data source."""
        canvas = self.canvas
        self.styles.apply(element.style, canvas)
        items = self.binder.lookup(element.items)
        if not isinstance(items, list):
            logger.warning(f"List data source '{element.items}' not found or not a list")
            self._spacing(element.spacing_after)
            return

        bullet = element.bullet or DEFAULT_BULLET
        indent = element.indent or DEFAULT_LIST_INDENT
        line_height = self.styles.line_height(element.style, DEFAULT_LINE_HEIGHT)
        left = canvas.margins[0]
        for item in items:
            if not isinstance(item, str):
                continue
            canvas.set_x(left + indent)
            canvas.cell(BULLET_WIDTH, line_height, bullet)
            canvas.cell(0, line_height, item, ln=1)

        self._spacing(element.spacing_after)

    def render_key_value_list(self, element: KeyValueListElement) -> None:
        canvas = self.canvas
        self.styles.apply(element.style, canvas)
        key_width = element.key_width or DEFAULT_KEY_WIDTH
        line_height = self.styles.line_height(element.style, DEFAULT_LINE_HEIGHT)
        value_align = element.value_align or "L"

        for item in element.items:
            canvas.cell(key_width, line_height, f"{item.key}:")
            value = self.binder.resolve(item.value)
            canvas.cell(element.value_width, line_height, value, ln=1, align=value_align)

        self._spacing(element.spacing_after)

    def render_line(self, element: LineElement) -> None:
        canvas = self.canvas
        if element.color:
            canvas.set_draw_color(*parse_color(element.color))
        if element.width > 0:
            canvas.set_line_width(element.width)
        canvas.line(
            self._resolve_x(element.x1),
            self._resolve_y(element.y1),
            self._resolve_x(element.x2),
            self._resolve_y(element.y2),
        )
        self._spacing(element.spacing_after)

    def render_rectangle(self, element: RectangleElement) -> None:
        canvas = self.canvas
        x, y = self._resolve_x(element.x), self._resolve_y(element.y)

        style = ""
        if element.fill_color is not None:
            canvas.set_fill_color(*element.fill_color.to_rgb())
            style = "F"
        if element.border_color is not None:
            canvas.set_draw_color(*element.border_color.to_rgb())
            style += "D"
        if not style:
            style = "D"
        if element.border_width > 0:
            canvas.set_line_width(element.border_width)

        if element.radius > 0:
            canvas.rounded_rect(x, y, element.width, element.height, element.radius, style)
        else:
            canvas.rect(x, y, element.width, element.height, style)

        if element.spacing_after > 0:
            canvas.set_y(y + element.height + element.spacing_after)

    def render_page_break(self, element: PageBreakElement) -> None:
        self.canvas.add_page()

"""Paged drawing surface on top of the ReportLab canvas.

``ReportCanvas`` gives the renderers a cursor-based, top-left-origin view of
a ReportLab ``pdfgen`` canvas: coordinates are in document units (mm by
default), text is drawn in cells that advance the cursor, and a cell that
would cross the bottom margin starts a new page on its own.

Drawing failures (an unreadable image, a missing page) do not raise. The
first failure is recorded and exposed through ``error`` so the caller can
abort the document at a point of its choosing.

Example:
    ```python
    from reportml.engine.canvas import ReportCanvas

    canvas = ReportCanvas(orientation="portrait", unit="mm", page_format="A4")
    canvas.set_margins(15, 15, 15)
    canvas.set_auto_page_break(True, 15)
    canvas.add_page()
    canvas.set_font("Helvetica", "B", 16)
    canvas.cell(0, 10, "Quarterly Report", ln=1, align="C")
    with open("report.pdf", "wb") as fh:
        canvas.output(fh)
    ```
"""

import hashlib
import io
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from reportlab.lib.pagesizes import A3, A4, A5, landscape, legal, letter, portrait
from reportlab.lib.units import cm, inch, mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas as rl_canvas

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]
PageCallback = Callable[["ReportCanvas"], None]

PAGE_FORMATS: dict[str, tuple[float, float]] = {
    "a3": A3,
    "a4": A4,
    "a5": A5,
    "letter": letter,
    "legal": legal,
    "tabloid": (11 * inch, 17 * inch),
}

UNIT_SCALES: dict[str, float] = {
    "pt": 1.0,
    "mm": mm,
    "cm": cm,
    "in": inch,
}

_HELVETICA = {"": "Helvetica", "B": "Helvetica-Bold", "I": "Helvetica-Oblique", "BI": "Helvetica-BoldOblique"}

CORE_FONTS: dict[str, dict[str, str]] = {
    "helvetica": _HELVETICA,
    "arial": _HELVETICA,
    "times": {"": "Times-Roman", "B": "Times-Bold", "I": "Times-Italic", "BI": "Times-BoldItalic"},
    "courier": {"": "Courier", "B": "Courier-Bold", "I": "Courier-Oblique", "BI": "Courier-BoldOblique"},
    "symbol": {"": "Symbol"},
    "zapfdingbats": {"": "ZapfDingbats"},
}

# One centimetre, the default page margin, expressed in points.
_DEFAULT_MARGIN_PT = 28.35


@dataclass(frozen=True)
class GraphicsState:
    """Snapshot of the canvas state styles and elements modify."""

    font_family: str
    font_style: str
    font_size: float
    text_color: RGB
    fill_color: RGB
    draw_color: RGB
    line_width: float


class ReportCanvas:
    """Cursor-based paged canvas writing PDF through ReportLab.

    Attributes:
        unit: Document unit all coordinates are expressed in
    """

    def __init__(
        self,
        orientation: str = "portrait",
        unit: str = "mm",
        page_format: str = "A4",
        custom_size: tuple[float, float] | None = None,
        compress: bool = True,
    ) -> None:
        """Create a document with the given page geometry.

        Args:
            orientation: "portrait" or "landscape"
            unit: "mm", "cm", "pt" or "in"
            page_format: Named page format, ignored when custom_size is given
            custom_size: Explicit (width, height) in document units
            compress: Compress PDF page streams

        Raises:
            ValueError: If the unit or page format is unknown
        """
        scale = UNIT_SCALES.get(unit)
        if scale is None:
            raise ValueError(f"Unknown unit '{unit}'")

        if custom_size is not None:
            size = (custom_size[0] * scale, custom_size[1] * scale)
        else:
            named_size = PAGE_FORMATS.get(page_format.lower())
            if named_size is None:
                raise ValueError(f"Unknown page format '{page_format}'")
            size = named_size
        size = landscape(size) if orientation == "landscape" else portrait(size)

        self.unit = unit
        self._k = scale
        self._page_width_pt, self._page_height_pt = size
        self._buffer = io.BytesIO()
        self._canvas = rl_canvas.Canvas(
            self._buffer,
            pagesize=size,
            pageCompression=1 if compress else 0,
        )

        margin = _DEFAULT_MARGIN_PT / scale
        self._left = margin
        self._top = margin
        self._right = margin
        self._bottom = 2 * margin
        self._cell_margin = margin / 10
        self._auto_page_break = True
        self._x = self._left
        self._y = self._top
        self._last_height = 0.0
        self._page = 0

        self._font_name = _HELVETICA[""]
        self._custom_fonts: dict[tuple[str, str], str] = {}
        self._state = GraphicsState(
            font_family="Helvetica",
            font_style="",
            font_size=12.0,
            text_color=(0, 0, 0),
            fill_color=(0, 0, 0),
            draw_color=(0, 0, 0),
            line_width=0.567 / scale,
        )

        self._header_func: Optional[PageCallback] = None
        self._footer_func: Optional[PageCallback] = None
        self._in_decoration = False
        self._error: Optional[Exception] = None
        self._closed = False

    # Page geometry

    @property
    def page_size(self) -> tuple[float, float]:
        """Page (width, height) in document units."""
        return self._page_width_pt / self._k, self._page_height_pt / self._k

    @property
    def margins(self) -> tuple[float, float, float, float]:
        """Page margins as (left, top, right, bottom)."""
        return self._left, self._top, self._right, self._bottom

    @property
    def content_width(self) -> float:
        return self.page_size[0] - self._left - self._right

    @property
    def page_break_trigger(self) -> float:
        """Y coordinate beyond which a cell starts a new page."""
        return self.page_size[1] - self._bottom

    def set_margins(self, left: float, top: float, right: float | None = None) -> None:
        """Set left, top and right margins. Right defaults to left."""
        self._left = left
        self._top = top
        self._right = left if right is None else right

    def set_auto_page_break(self, auto: bool, margin: float = 0.0) -> None:
        """Enable or disable automatic page breaks at ``margin`` from the bottom."""
        self._auto_page_break = auto
        self._bottom = margin

    # Page lifecycle

    def set_header_func(self, func: Optional[PageCallback]) -> None:
        """Install the callback run at the top of every new page."""
        self._header_func = func

    def set_footer_func(self, func: Optional[PageCallback]) -> None:
        """Install the callback run before a page is closed."""
        self._footer_func = func

    def page_no(self) -> int:
        """Return the current page number (0 before the first page)."""
        return self._page

    def add_page(self) -> None:
        """Close the current page, if any, and start a new one.

        The footer callback runs for the page being closed and the header
        callback for the new page. Afterwards the cursor sits at the top-left
        margin and the font, colors and line width are those in effect
        before the callbacks ran.
        """
        if self._closed:
            self.set_error(RuntimeError("Cannot add a page to a finished document"))
            return
        if self._page > 0:
            self._run_decoration(self._footer_func)
            self._canvas.showPage()
        self._page += 1
        self._x, self._y = self._left, self._top
        self._last_height = 0.0
        self._run_decoration(self._header_func)
        self._x, self._y = self._left, self._top

    def _run_decoration(self, func: Optional[PageCallback]) -> None:
        if func is None:
            return
        saved_state, saved_font = self._state, self._font_name
        self._in_decoration = True
        try:
            func(self)
        finally:
            self._in_decoration = False
            self._state, self._font_name = saved_state, saved_font

    # Fonts and colors

    @property
    def graphics_state(self) -> GraphicsState:
        return self._state

    def add_font_from_bytes(self, family: str, style: str, data: bytes) -> bool:
        """Register a TrueType font from raw file bytes.

        Args:
            family: Family name used by set_font
            style: Style flags the font provides ("", "B", "I", "BI")
            data: Contents of a .ttf file

        Returns:
            True if the font was registered, False if the bytes could not
            be loaded as a TrueType font
        """
        flags = _normalize_style(style)
        # The ReportLab font registry is process-wide; names are keyed on content.
        digest = hashlib.sha1(data).hexdigest()[:12]
        font_name = f"{family}-{flags or 'R'}-{digest}"
        try:
            if font_name not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(TTFont(font_name, io.BytesIO(data)))
        except Exception as e:
            logger.warning(f"Could not load font '{family}' ({flags or 'regular'}): {e}")
            return False
        self._custom_fonts[(family.lower(), flags)] = font_name
        logger.debug(f"Registered font {font_name}")
        return True

    def set_font(self, family: str, style: str = "", size: float = 0.0) -> None:
        """Select the font used by subsequent text.

        Args:
            family: Core family (Helvetica, Arial, Times, Courier, Symbol,
                ZapfDingbats) or a family registered with add_font_from_bytes
            style: Any combination of "B" (bold), "I" (italic), "U" (underline)
            size: Size in points, 0 keeps the current size
        """
        flags = _normalize_style(style)
        underline = "U" in style.upper()
        font_name = self._resolve_font(family, flags)
        if font_name is None:
            logger.warning(f"Font family '{family}' is not available, using Helvetica")
            family = "Helvetica"
            font_name = _HELVETICA[flags]

        self._font_name = font_name
        self._state = replace(
            self._state,
            font_family=family,
            font_style=flags + ("U" if underline else ""),
            font_size=size if size > 0 else self._state.font_size,
        )

    def _resolve_font(self, family: str, flags: str) -> str | None:
        key = family.lower()
        if (key, flags) in self._custom_fonts:
            return self._custom_fonts[(key, flags)]
        if (key, "") in self._custom_fonts:
            logger.debug(f"Font '{family}' has no '{flags}' variant, using regular")
            return self._custom_fonts[(key, "")]
        core = CORE_FONTS.get(key)
        if core is not None:
            return core.get(flags, core[""])
        return None

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self._state = replace(self._state, text_color=(r, g, b))

    def set_fill_color(self, r: int, g: int, b: int) -> None:
        self._state = replace(self._state, fill_color=(r, g, b))

    def set_draw_color(self, r: int, g: int, b: int) -> None:
        self._state = replace(self._state, draw_color=(r, g, b))

    def set_line_width(self, width: float) -> None:
        self._state = replace(self._state, line_width=width)

    def get_string_width(self, text: str) -> float:
        """Width of ``text`` in the current font, in document units."""
        return pdfmetrics.stringWidth(text, self._font_name, self._state.font_size) / self._k

    # Cursor

    def get_x(self) -> float:
        return self._x

    def get_y(self) -> float:
        return self._y

    def set_x(self, x: float) -> None:
        """Move the cursor horizontally; negative values count from the right edge."""
        self._x = x if x >= 0 else self.page_size[0] + x

    def set_y(self, y: float) -> None:
        """Move the cursor vertically and back to the left margin.

        Negative values count from the bottom edge.
        """
        self._x = self._left
        self._y = y if y >= 0 else self.page_size[1] + y

    def set_xy(self, x: float, y: float) -> None:
        self.set_y(y)
        self.set_x(x)

    def ln(self, height: float | None = None) -> None:
        """Line break: back to the left margin and down by ``height``.

        Without a height the cursor moves down by the height of the last cell.
        """
        self._x = self._left
        self._y += self._last_height if height is None else height

    # Drawing

    def cell(
        self,
        width: float,
        height: float,
        text: str = "",
        border: str = "",
        ln: int = 0,
        align: str = "L",
        fill: bool = False,
    ) -> None:
        """Draw a single-line cell at the cursor.

        Args:
            width: Cell width, 0 extends to the right margin
            height: Cell height
            text: Text to print, vertically centered
            border: "1" for a frame, or any of "L", "T", "R", "B"
            ln: Where the cursor goes afterwards: 0 to the right, 1 to the
                start of the next line, 2 below the cell
            align: "L", "C" or "R"
            fill: Paint the cell background with the fill color
        """
        if not self._require_page():
            return

        if (
            self._auto_page_break
            and not self._in_decoration
            and self._y + height > self.page_break_trigger
        ):
            x = self._x
            self.add_page()
            self._x = x

        if width == 0:
            width = self.page_size[0] - self._right - self._x

        x, y = self._x, self._y
        border = str(border).upper()
        full_border = border == "1"
        if fill or full_border:
            self._apply_fill_color()
            self._apply_draw_color()
            self._canvas.rect(
                x * self._k,
                self._pdf_y(y + height),
                width * self._k,
                height * self._k,
                stroke=1 if full_border else 0,
                fill=1 if fill else 0,
            )
        if border and not full_border:
            self._draw_partial_border(x, y, width, height, border)

        if text:
            self._draw_text(text, x, y, width, height, align)

        self._last_height = height
        if ln > 0:
            self._y += height
            if ln == 1:
                self._x = self._left
        else:
            self._x += width

    def multi_cell(
        self,
        width: float,
        height: float,
        text: str,
        border: str = "",
        align: str = "L",
        fill: bool = False,
    ) -> None:
        """Draw text wrapped over as many lines as needed.

        Each line is a cell of the given height. Explicit newlines start a
        new line. Afterwards the cursor is at the left margin below the text.

        Args:
            width: Cell width, 0 extends to the right margin
            height: Height of each line
            text: Text to wrap
            border: Border specification applied to each line
            align: "L", "C" or "R"
            fill: Paint the line backgrounds with the fill color
        """
        if not self._require_page():
            return
        if width == 0:
            width = self.page_size[0] - self._right - self._x

        start_x = self._x
        for line in self.wrap_text(text, width - 2 * self._cell_margin):
            self._x = start_x
            self.cell(width, height, line, border=border, ln=2, align=align, fill=fill)
        self._x = self._left

    def wrap_text(self, text: str, max_width: float) -> list[str]:
        """Split text into lines no wider than ``max_width`` in the current font.

        Word wrapping is done by ReportLab's ``simpleSplit``, which leaves a
        single word wider than the line intact; such words are broken at the
        last character that still fits.
        """
        lines: list[str] = []
        size = self._state.font_size
        for paragraph in text.replace("\r\n", "\n").split("\n"):
            wrapped = simpleSplit(paragraph, self._font_name, size, max_width * self._k) or [""]
            for line in wrapped:
                while " " not in line and len(line) > 1 and self.get_string_width(line) > max_width:
                    cut = self._fit_prefix(line, max_width)
                    lines.append(line[:cut])
                    line = line[cut:]
                lines.append(line)
        return lines

    def _fit_prefix(self, word: str, max_width: float) -> int:
        cut = 1
        while cut < len(word) and self.get_string_width(word[: cut + 1]) <= max_width:
            cut += 1
        return cut

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Draw a line with the current draw color and line width."""
        if not self._require_page():
            return
        self._apply_draw_color()
        self._canvas.line(x1 * self._k, self._pdf_y(y1), x2 * self._k, self._pdf_y(y2))

    def rect(self, x: float, y: float, width: float, height: float, style: str = "D") -> None:
        """Draw a rectangle. Style "D" outlines, "F" fills, "FD" does both."""
        if not self._require_page():
            return
        stroke, fill = self._paint_flags(style)
        self._canvas.rect(
            x * self._k,
            self._pdf_y(y + height),
            width * self._k,
            height * self._k,
            stroke=stroke,
            fill=fill,
        )

    def rounded_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        radius: float,
        style: str = "D",
    ) -> None:
        """Draw a rectangle with all four corners rounded by ``radius``."""
        if not self._require_page():
            return
        stroke, fill = self._paint_flags(style)
        self._canvas.roundRect(
            x * self._k,
            self._pdf_y(y + height),
            width * self._k,
            height * self._k,
            radius * self._k,
            stroke=stroke,
            fill=fill,
        )

    def image(
        self,
        path: str | Path,
        x: float,
        y: float,
        width: float = 0.0,
        height: float = 0.0,
    ) -> tuple[float, float] | None:
        """Place an image with its top-left corner at (x, y).

        A zero width or height is derived from the image's aspect ratio; if
        both are zero the image is placed at 1 pixel per point.

        Returns:
            The (width, height) drawn, or None if the image could not be
            loaded (the failure is recorded in ``error``)
        """
        if not self._require_page():
            return None
        try:
            reader = ImageReader(str(path))
            pixel_width, pixel_height = reader.getSize()
            if width == 0 and height == 0:
                width, height = pixel_width / self._k, pixel_height / self._k
            elif width == 0:
                width = height * pixel_width / pixel_height
            elif height == 0:
                height = width * pixel_height / pixel_width
            self._canvas.drawImage(
                reader,
                x * self._k,
                self._pdf_y(y + height),
                width=width * self._k,
                height=height * self._k,
                mask="auto",
            )
        except Exception as e:
            self.set_error(OSError(f"Cannot place image {path}: {e}"))
            return None
        return width, height

    def set_document_info(
        self,
        title: str = "",
        author: str = "",
        subject: str = "",
        creator: str = "",
        keywords: str = "",
    ) -> None:
        """Set the PDF document information dictionary. Empty values are skipped."""
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        if subject:
            self._canvas.setSubject(subject)
        if creator:
            self._canvas.setCreator(creator)
        if keywords:
            self._canvas.setKeywords(keywords)

    # Error state and output

    @property
    def error(self) -> Optional[Exception]:
        """First recorded drawing failure, or None."""
        return self._error

    @property
    def ok(self) -> bool:
        return self._error is None

    def set_error(self, error: Exception) -> None:
        """Record a failure. Only the first one is kept."""
        if self._error is None:
            logger.debug(f"Canvas error recorded: {error}")
            self._error = error

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Finish the document: draw the last footer and serialize the PDF.

        A document without pages gets one blank page. Calling close again
        has no effect; drawing after close records an error.
        """
        if self._closed:
            return
        if self._page == 0:
            self.add_page()
        self._run_decoration(self._footer_func)
        self._canvas.showPage()
        self._canvas.save()
        self._closed = True

    def output(self, stream: BinaryIO) -> None:
        """Finish the document and write it to a binary stream.

        The stream is not closed.
        """
        self.close()
        stream.write(self._buffer.getvalue())

    def output_file(self, path: str | Path) -> None:
        """Finish the document and write it to ``path``."""
        self.close()
        with open(path, "wb") as fh:
            fh.write(self._buffer.getvalue())

    # Internals

    def _require_page(self) -> bool:
        if self._closed:
            self.set_error(RuntimeError("Cannot draw on a finished document"))
            return False
        if self._page == 0:
            self.set_error(RuntimeError("No page has been added to the document"))
            return False
        return True

    def _pdf_y(self, y: float) -> float:
        return self._page_height_pt - y * self._k

    def _apply_fill_color(self) -> None:
        self._canvas.setFillColorRGB(*_unit_rgb(self._state.fill_color))

    def _apply_draw_color(self) -> None:
        self._canvas.setStrokeColorRGB(*_unit_rgb(self._state.draw_color))
        self._canvas.setLineWidth(self._state.line_width * self._k)

    def _paint_flags(self, style: str) -> tuple[int, int]:
        flags = style.upper()
        fill = 1 if "F" in flags else 0
        stroke = 1 if "D" in flags or not fill else 0
        if fill:
            self._apply_fill_color()
        if stroke:
            self._apply_draw_color()
        return stroke, fill

    def _draw_partial_border(self, x: float, y: float, width: float, height: float, border: str) -> None:
        self._apply_draw_color()
        left, top = x * self._k, self._pdf_y(y)
        right, bottom = (x + width) * self._k, self._pdf_y(y + height)
        if "L" in border:
            self._canvas.line(left, top, left, bottom)
        if "T" in border:
            self._canvas.line(left, top, right, top)
        if "R" in border:
            self._canvas.line(right, top, right, bottom)
        if "B" in border:
            self._canvas.line(left, bottom, right, bottom)

    def _draw_text(self, text: str, x: float, y: float, width: float, height: float, align: str) -> None:
        text_width = self.get_string_width(text)
        if align == "R":
            dx = width - self._cell_margin - text_width
        elif align == "C":
            dx = (width - text_width) / 2
        else:
            dx = self._cell_margin

        font_size = self._state.font_size / self._k
        baseline = y + 0.5 * height + 0.3 * font_size
        self._canvas.setFont(self._font_name, self._state.font_size)
        self._canvas.setFillColorRGB(*_unit_rgb(self._state.text_color))
        self._canvas.drawString((x + dx) * self._k, self._pdf_y(baseline), text)

        if "U" in self._state.font_style:
            thickness = 0.05 * self._state.font_size
            self._canvas.rect(
                (x + dx) * self._k,
                self._pdf_y(baseline) - 0.1 * self._state.font_size - thickness,
                text_width * self._k,
                thickness,
                stroke=0,
                fill=1,
            )


def _normalize_style(style: str) -> str:
    flags = style.upper()
    return ("B" if "B" in flags else "") + ("I" if "I" in flags else "")


def _unit_rgb(color: RGB) -> tuple[float, float, float]:
    return color[0] / 255.0, color[1] / 255.0, color[2] / 255.0

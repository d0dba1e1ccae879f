"""Tests for the ReportLab-backed canvas.

This module contains unit tests for page geometry, cursor movement,
cells, automatic page breaks, header/footer callbacks, error recording
and serialization.
"""

import io
import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import reportlab
from reportlab.pdfbase import pdfmetrics

from reportml.engine.canvas import ReportCanvas

REPORTLAB_FONTS = Path(reportlab.__file__).parent / "fonts"


class TestGeometry:
    """Tests for page size and units."""

    def test_a4_portrait_mm(self) -> None:
        """Test the default page is A4 portrait in millimetres."""
        width, height = ReportCanvas().page_size
        assert width == pytest.approx(210, abs=0.01)
        assert height == pytest.approx(297, abs=0.01)

    def test_landscape_swaps_dimensions(self) -> None:
        """Test landscape orientation."""
        width, height = ReportCanvas(orientation="landscape", page_format="a4").page_size
        assert width == pytest.approx(297, abs=0.01)
        assert height == pytest.approx(210, abs=0.01)

    def test_tabloid_in_inches(self) -> None:
        """Test tabloid format measured in inches."""
        width, height = ReportCanvas(unit="in", page_format="Tabloid").page_size
        assert width == pytest.approx(11)
        assert height == pytest.approx(17)

    def test_custom_size_overrides_format(self) -> None:
        """Test an explicit size wins over the named format."""
        canvas = ReportCanvas(unit="pt", page_format="A3", custom_size=(300, 400))
        assert canvas.page_size == pytest.approx((300, 400))

    def test_unknown_unit_and_format(self) -> None:
        """Test invalid page setup raises ValueError."""
        with pytest.raises(ValueError):
            ReportCanvas(unit="furlong")
        with pytest.raises(ValueError):
            ReportCanvas(page_format="B7")

    def test_compression_flag_passed_to_reportlab(self) -> None:
        """Test the compress flag controls page compression."""
        with patch("reportml.engine.canvas.rl_canvas.Canvas") as mock_canvas:
            ReportCanvas(compress=False)
        assert mock_canvas.call_args.kwargs["pageCompression"] == 0

    def test_margins(self) -> None:
        """Test margins and page break trigger."""
        canvas = ReportCanvas()
        canvas.set_margins(10, 20)
        canvas.set_auto_page_break(True, 25)
        assert canvas.margins == (10, 20, 10, 25)
        assert canvas.page_break_trigger == pytest.approx(297 - 25, abs=0.01)
        assert canvas.content_width == pytest.approx(190, abs=0.01)


class TestCursor:
    """Tests for cursor positioning."""

    def test_new_page_starts_at_margins(self, canvas: ReportCanvas) -> None:
        """Test the cursor starts at the top-left margin."""
        assert (canvas.get_x(), canvas.get_y()) == (15, 15)
        assert canvas.page_no() == 1

    def test_negative_coordinates_are_edge_relative(self, canvas: ReportCanvas) -> None:
        """Test negative x and y count from the right and bottom edges."""
        canvas.set_xy(-30, -15)
        assert canvas.get_x() == pytest.approx(180, abs=0.01)
        assert canvas.get_y() == pytest.approx(282, abs=0.01)

    def test_set_y_resets_x(self, canvas: ReportCanvas) -> None:
        """Test set_y returns x to the left margin."""
        canvas.set_x(100)
        canvas.set_y(50)
        assert canvas.get_x() == 15
        assert canvas.get_y() == 50

    def test_ln_uses_last_cell_height(self, canvas: ReportCanvas) -> None:
        """Test ln without a height moves by the last cell height."""
        canvas.cell(20, 8, "a")
        canvas.ln()
        assert (canvas.get_x(), canvas.get_y()) == (15, 23)
        canvas.ln(4)
        assert canvas.get_y() == 27


class TestCells:
    """Tests for cell and multi_cell."""

    def test_cell_ln_modes(self, canvas: ReportCanvas) -> None:
        """Test cursor placement after a cell for each ln mode."""
        canvas.cell(40, 10, "right")
        assert (canvas.get_x(), canvas.get_y()) == (55, 15)
        canvas.cell(40, 10, "below", ln=2)
        assert (canvas.get_x(), canvas.get_y()) == (55, 25)
        canvas.cell(40, 10, "next line", ln=1)
        assert (canvas.get_x(), canvas.get_y()) == (15, 35)

    def test_zero_width_extends_to_right_margin(self, canvas: ReportCanvas) -> None:
        """Test a zero-width cell reaches the right margin."""
        canvas.set_x(50)
        canvas.cell(0, 10, "fill")
        assert canvas.get_x() == pytest.approx(195, abs=0.01)

    def test_auto_page_break(self, canvas: ReportCanvas) -> None:
        """Test a cell crossing the bottom margin starts a new page."""
        canvas.set_xy(40, 280)
        canvas.cell(20, 10, "overflow", ln=2)
        assert canvas.page_no() == 2
        assert canvas.get_x() == 40
        assert canvas.get_y() == 25

    def test_no_page_break_when_disabled(self, canvas: ReportCanvas) -> None:
        """Test disabling automatic breaks keeps drawing on the page."""
        canvas.set_auto_page_break(False)
        canvas.set_y(290)
        canvas.cell(0, 10, "bottom")
        assert canvas.page_no() == 1

    def test_multi_cell_wraps(self, canvas: ReportCanvas) -> None:
        """Test long text wraps across several lines."""
        canvas.set_x(40)
        canvas.multi_cell(50, 5, "lorem ipsum dolor sit amet " * 10)
        assert canvas.get_y() > 15 + 5 * 3
        assert canvas.get_x() == 15

    def test_multi_cell_honors_newlines(self, canvas: ReportCanvas) -> None:
        """Test explicit newlines start new lines."""
        canvas.multi_cell(0, 5, "one\ntwo\nthree")
        assert canvas.get_y() == pytest.approx(30)

    def test_wrap_text_breaks_long_words(self, canvas: ReportCanvas) -> None:
        """Test words wider than the line are split."""
        lines = canvas.wrap_text("x" * 200, 20)
        assert len(lines) > 1
        assert "".join(lines) == "x" * 200
        assert all(canvas.get_string_width(line) <= 20 for line in lines)

    def test_wrap_text_breaks_between_words(self, canvas: ReportCanvas) -> None:
        """Test lines break at spaces and keep every word whole."""
        text = "quarterly revenue grew in every region " * 6
        lines = canvas.wrap_text(text, 40)
        assert len(lines) > 1
        assert " ".join(lines).split() == text.split()
        assert all(canvas.get_string_width(line) <= 40 for line in lines)

    def test_wrap_text_mixes_words_and_long_tokens(self, canvas: ReportCanvas) -> None:
        """Test an overlong token between words is split on its own line."""
        lines = canvas.wrap_text("see " + "y" * 120 + " end", 20)
        assert lines[0] == "see"
        assert lines[-1].endswith("end")
        assert "".join(line for line in lines if line.startswith("y")) == "y" * 120
        assert all(canvas.get_string_width(line) <= 20 for line in lines)

    def test_string_width_scales_with_size(self, canvas: ReportCanvas) -> None:
        """Test string width grows with font size."""
        canvas.set_font("Helvetica", "", 10)
        small = canvas.get_string_width("Report")
        canvas.set_font("Helvetica", "", 20)
        assert canvas.get_string_width("Report") == pytest.approx(small * 2)


class TestFonts:
    """Tests for font selection."""

    def test_core_font_styles(self, canvas: ReportCanvas) -> None:
        """Test style flags and size handling."""
        canvas.set_font("Times", "bi", 14)
        state = canvas.graphics_state
        assert state.font_family == "Times"
        assert state.font_style == "BI"
        assert state.font_size == 14
        canvas.set_font("Times", "U")
        assert canvas.graphics_state.font_size == 14
        assert canvas.graphics_state.font_style == "U"

    def test_unknown_family_falls_back(
        self,
        canvas: ReportCanvas,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test unknown families fall back to Helvetica with a warning."""
        with caplog.at_level(logging.WARNING):
            canvas.set_font("NoSuchFont", "B", 11)
        assert canvas.graphics_state.font_family == "Helvetica"
        assert "NoSuchFont" in caplog.text

    def test_invalid_font_bytes(self, canvas: ReportCanvas) -> None:
        """Test unreadable font data is reported, not raised."""
        assert canvas.add_font_from_bytes("Broken", "", b"not a font") is False
        assert canvas.ok

    def test_same_family_from_different_files(self) -> None:
        """Test each canvas draws with the font file it registered."""
        faces = []
        for file_name in ("Vera.ttf", "VeraBd.ttf"):
            canvas = ReportCanvas()
            canvas.add_page()
            assert canvas.add_font_from_bytes("Brand", "", (REPORTLAB_FONTS / file_name).read_bytes())
            canvas.set_font("Brand", "", 12)
            assert canvas.graphics_state.font_family == "Brand"
            faces.append(pdfmetrics.getFont(canvas._font_name).face.name)
        assert faces == [b"BitstreamVeraSans-Roman", b"BitstreamVeraSans-Bold"]

    def test_same_file_registers_once(self) -> None:
        """Test identical font data maps to one registered font."""
        data = (REPORTLAB_FONTS / "Vera.ttf").read_bytes()
        first, second = ReportCanvas(), ReportCanvas()
        for canvas in (first, second):
            canvas.add_page()
            canvas.add_font_from_bytes("Brand", "", data)
            canvas.set_font("Brand")
        assert first._font_name == second._font_name


class TestDecorations:
    """Tests for header and footer callbacks."""

    def test_header_and_footer_call_counts(self) -> None:
        """Test header runs per page and footer per closed page."""
        canvas = ReportCanvas()
        header, footer = Mock(), Mock()
        canvas.set_header_func(header)
        canvas.set_footer_func(footer)
        canvas.add_page()
        canvas.add_page()
        assert header.call_count == 2
        assert footer.call_count == 1
        canvas.output(io.BytesIO())
        assert footer.call_count == 2
        header.assert_called_with(canvas)

    def test_callbacks_do_not_leak_state(self) -> None:
        """Test font and colors set by a header are restored afterwards."""
        canvas = ReportCanvas()
        canvas.set_margins(15, 15)

        def header(c: ReportCanvas) -> None:
            c.set_font("Courier", "B", 30)
            c.set_text_color(255, 0, 0)
            c.set_y(100)

        canvas.set_header_func(header)
        before = canvas.graphics_state
        canvas.add_page()
        assert canvas.graphics_state == before
        assert (canvas.get_x(), canvas.get_y()) == (15, 15)

    def test_header_errors_propagate(self) -> None:
        """Test exceptions raised by a header are not swallowed."""
        canvas = ReportCanvas()
        canvas.set_header_func(Mock(side_effect=RuntimeError("header failed")))
        with pytest.raises(RuntimeError, match="header failed"):
            canvas.add_page()


class TestErrorsAndOutput:
    """Tests for error recording and serialization."""

    def test_drawing_without_page_records_error(self) -> None:
        """Test drawing before add_page records an error."""
        canvas = ReportCanvas()
        canvas.cell(10, 10, "x")
        assert not canvas.ok
        assert "page" in str(canvas.error)

    def test_first_error_wins(self, canvas: ReportCanvas) -> None:
        """Test only the first error is kept."""
        first = RuntimeError("first")
        canvas.set_error(first)
        canvas.set_error(RuntimeError("second"))
        assert canvas.error is first

    def test_missing_image_records_error(self, canvas: ReportCanvas, tmp_path: Path) -> None:
        """Test an unreadable image is recorded, not raised."""
        assert canvas.image(tmp_path / "nope.png", 10, 10, 20) is None
        assert not canvas.ok

    def test_image_keeps_aspect_ratio(self, canvas: ReportCanvas, image_file: Path) -> None:
        """Test a missing dimension follows the image aspect ratio."""
        assert canvas.image(image_file, 10, 10, width=40) == pytest.approx((40, 20))
        assert canvas.image(image_file, 10, 40, height=5) == pytest.approx((10, 5))
        assert canvas.ok

    def test_output_to_stream(self, canvas: ReportCanvas) -> None:
        """Test output writes a PDF and leaves the stream open."""
        canvas.set_document_info(title="Title", author="Author", creator="reportml")
        canvas.cell(0, 10, "Hello", ln=1)
        canvas.line(15, 30, 195, 30)
        canvas.rect(15, 40, 50, 20, "FD")
        canvas.rounded_rect(80, 40, 50, 20, 3, "F")
        stream = io.BytesIO()
        canvas.output(stream)
        assert not stream.closed
        assert stream.getvalue().startswith(b"%PDF")
        assert canvas.closed

    def test_output_file(self, canvas: ReportCanvas, tmp_path: Path) -> None:
        """Test output_file writes the PDF to disk."""
        path = tmp_path / "out.pdf"
        canvas.output_file(path)
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_document_gets_a_page(self) -> None:
        """Test closing a document without pages adds one."""
        canvas = ReportCanvas()
        stream = io.BytesIO()
        canvas.output(stream)
        assert canvas.page_no() == 1
        assert stream.getvalue().startswith(b"%PDF")

    def test_drawing_after_close_records_error(self, canvas: ReportCanvas) -> None:
        """Test drawing on a finished document records an error."""
        canvas.close()
        canvas.line(0, 0, 10, 10)
        assert not canvas.ok

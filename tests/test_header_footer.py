"""Tests for header and footer callbacks."""

from unittest.mock import patch

import pytest

from reportml.engine.canvas import ReportCanvas
from reportml.engine.header_footer import create_footer, create_header
from reportml.engine.renderer import ElementRenderer
from reportml.models import Footer, Header, LineElement, TextElement


class TestCreateHeader:
    """Tests for create_header."""

    def test_absent_or_disabled(self, renderer: ElementRenderer) -> None:
        """Test no callback is created without an enabled header."""
        assert create_header(None, renderer) is None
        assert create_header(Header(enabled=False, elements=[TextElement(content="x")]), renderer) is None

    def test_header_restores_cursor(self, renderer: ElementRenderer, canvas: ReportCanvas) -> None:
        """Test the header renders its elements and returns to the top margin."""
        header = Header(enabled=True, height=12, elements=[TextElement(content="{{ .Company }}", y=5)])
        draw_header = create_header(header, renderer)
        with patch.object(ElementRenderer, "render", autospec=True, side_effect=ElementRenderer.render) as render:
            draw_header(canvas)
        assert render.call_args.args[1] is header.elements[0]
        assert (canvas.get_x(), canvas.get_y()) == (15, 15)


class TestCreateFooter:
    """Tests for create_footer."""

    def test_disabled(self, renderer: ElementRenderer) -> None:
        """Test a disabled footer has no callback."""
        assert create_footer(Footer(enabled=False), renderer) is None

    def test_footer_starts_above_bottom_edge(self, renderer: ElementRenderer, canvas: ReportCanvas) -> None:
        """Test the footer cursor is placed height units above the page bottom."""
        footer = Footer(enabled=True, height=12, elements=[TextElement(content="Page footer")])
        draw_footer = create_footer(footer, renderer)
        canvas.set_auto_page_break(False)
        original = ReportCanvas.cell
        with patch.object(ReportCanvas, "cell", autospec=True, side_effect=original) as cell:
            draw_footer(canvas)
        assert cell.call_args.args[3] == "Page footer"
        assert canvas.get_y() == pytest.approx(297 - 12 + 6, abs=0.01)

    def test_footer_elements_in_order(self, renderer: ElementRenderer, canvas: ReportCanvas) -> None:
        """Test footer elements render in declared order."""
        elements = [LineElement(x1=15, y1=-15, x2=-15, y2=-15), TextElement(content="end")]
        draw_footer = create_footer(Footer(enabled=True, height=10, elements=elements), renderer)
        with patch.object(ElementRenderer, "render", autospec=True) as render:
            draw_footer(canvas)
        assert [call.args[1].kind for call in render.call_args_list] == ["line", "text"]

"""Header and footer callbacks for report pages.

This module builds the callables the canvas runs when a page starts
(header) and before it is closed (footer). Each callback renders the
block's elements through the same element renderer the sections use.
"""

import logging
from typing import Callable

from reportml.engine.canvas import ReportCanvas
from reportml.engine.renderer import ElementRenderer
from reportml.models.document import Footer, Header

logger = logging.getLogger(__name__)


def create_header(
    header: Header | None,
    renderer: ElementRenderer,
) -> Callable[[ReportCanvas], None] | None:
    """Create header callback function for report pages.

    The callback renders the header elements in declared order and then
    returns the cursor to the top-left margin, so page content always
    starts at the same place regardless of what the header drew.

    Args:
        header: Header block from the template (optional)
        renderer: Element renderer bound to the document's canvas

    Returns:
        Callable function(canvas) for drawing the header, or None if the
        header is absent or disabled
    """
    if header is None or not header.enabled:
        return None

    def draw_header(canvas: ReportCanvas) -> None:
        """Draw header on the page that was just started.

        Args:
            canvas: Canvas whose new page receives the header
        """
        for element in header.elements:
            renderer.render(element)
        left, top, _, _ = canvas.margins
        canvas.set_xy(left, top)

    logger.debug(f"Header installed with {len(header.elements)} elements")
    return draw_header


def create_footer(
    footer: Footer | None,
    renderer: ElementRenderer,
) -> Callable[[ReportCanvas], None] | None:
    """Create footer callback function for report pages.

    The callback moves the cursor ``footer.height`` above the bottom edge
    and renders the footer elements in declared order.

    Args:
        footer: Footer block from the template (optional)
        renderer: Element renderer bound to the document's canvas

    Returns:
        Callable function(canvas) for drawing the footer, or None if the
        footer is absent or disabled
    """
    if footer is None or not footer.enabled:
        return None

    def draw_footer(canvas: ReportCanvas) -> None:
        """Draw footer on the page about to be closed.

        Args:
            canvas: Canvas whose current page receives the footer
        """
        canvas.set_y(-footer.height)
        for element in footer.elements:
            renderer.render(element)

    logger.debug(f"Footer installed with {len(footer.elements)} elements")
    return draw_footer

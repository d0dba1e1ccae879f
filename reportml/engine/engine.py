"""Report rendering pipeline.

``ReportEngine`` drives one document through its lifecycle:

    NO_DOCUMENT --initialize--> INITIALIZED --add_page--> PAGE_ACTIVE --finalize--> FINALIZED

It builds the canvas from the template's page setup, registers fonts,
installs the header and footer, renders sections in declared order and
writes the finished PDF to a path or stream.

Example:
    ```python
    from reportml.engine import ReportEngine
    from reportml.parser import parse_data_file, parse_template

    engine = ReportEngine()
    engine.set_report(parse_template("invoice.xml"))
    engine.set_data(parse_data_file("invoice.json"))
    engine.generate("invoice.pdf")
    ```
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Callable, Mapping

from reportml.config import Config, get_config
from reportml.engine.binding import DataBinder
from reportml.engine.canvas import ReportCanvas
from reportml.engine.header_footer import create_footer, create_header
from reportml.engine.metadata import set_document_metadata
from reportml.engine.renderer import ElementRenderer
from reportml.engine.style_registry import StyleRegistry
from reportml.exceptions import GenerationError
from reportml.models.report import Report, Section
from reportml.parser.template_parser import apply_defaults

logger = logging.getLogger(__name__)

Sink = str | Path | BinaryIO


class EngineState(Enum):
    """Lifecycle state of the document held by an engine."""

    NO_DOCUMENT = "no_document"
    INITIALIZED = "initialized"
    PAGE_ACTIVE = "page_active"
    FINALIZED = "finalized"


class ReportEngine:
    """Renders a report template and data context to PDF.

    An engine holds the state of one document at a time and is not safe
    for concurrent use.

    Attributes:
        config: Configuration for asset paths, compression and formatting
        report: Template being rendered
        styles: Style registry built from the template
        binder: Data binder holding the data context
        canvas: Canvas of the current document, None before initialize
        state: Current lifecycle state
    """

    def __init__(
        self,
        config: Config | None = None,
        canvas_factory: Callable[..., ReportCanvas] = ReportCanvas,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration (default: global configuration)
            canvas_factory: Callable building the canvas from page setup
                keyword arguments
        """
        self.config = config or get_config()
        self._canvas_factory = canvas_factory
        self.report: Report | None = None
        self.styles = StyleRegistry()
        self.binder = DataBinder()
        self.canvas: ReportCanvas | None = None
        self.renderer: ElementRenderer | None = None
        self.state = EngineState.NO_DOCUMENT

    @property
    def data(self) -> dict[str, Any]:
        return self.binder.context

    def set_report(self, report: Report) -> None:
        """Use ``report`` as the template and rebuild the style registry."""
        self.report = apply_defaults(report)
        self.styles = StyleRegistry(self.report.styles)
        logger.debug(
            f"Report set: {len(self.report.sections)} sections, "
            f"{len(self.styles)} styles"
        )

    def set_data(self, data: Mapping[str, Any]) -> None:
        """Replace the data context."""
        self.binder.set_context(data)

    def merge_data(self, data: Mapping[str, Any]) -> None:
        """Merge top-level keys into the data context; later values win."""
        self.binder.merge(data)

    def reset(self) -> None:
        """Drop the template, styles, data context and current document."""
        self.report = None
        self.styles.clear()
        self.binder.clear()
        self.canvas = None
        self.renderer = None
        self.state = EngineState.NO_DOCUMENT

    def initialize(self) -> None:
        """Create the canvas for a new document.

        Raises:
            GenerationError: If no template is set or the page setup is invalid
        """
        if self.report is None:
            raise GenerationError("No report template has been set")

        document = self.report.document
        custom_size = None
        if document.custom_size is not None:
            custom_size = (document.custom_size.width, document.custom_size.height)

        try:
            canvas = self._canvas_factory(
                orientation=document.orientation,
                unit=document.unit,
                page_format=document.format,
                custom_size=custom_size,
                compress=self.config.compress,
            )
        except ValueError as e:
            raise GenerationError(
                f"Invalid page setup: {e}",
                context={"format": document.format, "unit": document.unit},
            ) from e

        margins = document.margins
        canvas.set_margins(margins.left, margins.top, margins.right)
        canvas.set_auto_page_break(True, margins.bottom)

        self.canvas = canvas
        self.renderer = ElementRenderer(canvas, self.styles, self.binder, self.config)
        self._register_fonts()
        canvas.set_header_func(create_header(self.report.header, self.renderer))
        canvas.set_footer_func(create_footer(self.report.footer, self.renderer))
        set_document_metadata(canvas, self.report.metadata)

        if self.config.schema_validation:
            logger.debug("Schema validation requested; templates are not checked against a schema")

        self.state = EngineState.INITIALIZED
        logger.debug(
            f"Document initialized: {document.format} {document.orientation}, "
            f"unit={document.unit}"
        )

    def _register_fonts(self) -> None:
        for font in self.report.fonts:
            path = self.config.resolve_font_path(font.file)
            try:
                data = path.read_bytes()
            except OSError as e:
                logger.warning(f"Font '{font.name or font.family}' unavailable, file {path}: {e}")
                continue
            self.canvas.add_font_from_bytes(font.family, font.style, data)

    def _require_canvas(self) -> ReportCanvas:
        if self.canvas is None or self.state == EngineState.NO_DOCUMENT:
            raise GenerationError("Engine is not initialized")
        if self.state == EngineState.FINALIZED:
            raise GenerationError("Document has already been finalized")
        return self.canvas

    def add_page(self) -> None:
        """Start a new page, running the footer and header callbacks.

        Raises:
            GenerationError: If the header or footer fails
        """
        canvas = self._require_canvas()
        try:
            canvas.add_page()
        except GenerationError:
            raise
        except Exception as e:
            logger.debug(f"Failed to start page: {e}", exc_info=True)
            raise GenerationError(
                f"Failed to start page {canvas.page_no() + 1}: {e}",
                context={"error": str(e)},
            ) from e
        self.state = EngineState.PAGE_ACTIVE

    def render_section(self, section: Section) -> None:
        """Render a section's elements in declared order.

        Args:
            section: Section to render

        Raises:
            GenerationError: If an element fails or leaves the canvas in an
                error state; the error names the section, element kind and
                element index
        """
        canvas = self._require_canvas()
        name = section.name or "<unnamed>"
        if self.state != EngineState.PAGE_ACTIVE:
            self.add_page()

        if section.condition or section.loop:
            logger.info(
                f"Section '{name}' declares condition/loop attributes; "
                "they are not evaluated and the section is rendered once"
            )

        if section.page_break_before:
            self.add_page()

        for index, element in enumerate(section.elements):
            kind = getattr(element, "kind", type(element).__name__)
            try:
                self.renderer.render(element)
            except Exception as e:
                logger.debug(
                    f"Failed to render {kind} element {index} in section '{name}': {e}",
                    exc_info=True,
                )
                raise GenerationError(
                    f"Failed to render {kind} element {index} in section '{name}': {e}",
                    context={"section": name, "element": kind, "index": index},
                    section=name,
                    element=kind,
                ) from e
            if not canvas.ok:
                raise GenerationError(
                    f"Canvas error in {kind} element {index} of section '{name}': {canvas.error}",
                    context={"section": name, "element": kind, "index": index},
                    section=name,
                    element=kind,
                )

        if section.page_break_after:
            self.add_page()

    def finalize(self, sink: Sink) -> None:
        """Finish the document and write it to ``sink``.

        Args:
            sink: Output path (opened and closed here) or binary stream
                (written, left open)

        Raises:
            GenerationError: If the canvas holds an error or writing fails
        """
        canvas = self._require_canvas()
        try:
            canvas.close()
        except Exception as e:
            logger.debug(f"Failed to finish document: {e}", exc_info=True)
            raise GenerationError(
                f"Failed to finish document: {e}",
                context={"error": str(e)},
            ) from e

        if not canvas.ok:
            raise GenerationError(
                f"PDF generation failed: {canvas.error}",
                context={"error": str(canvas.error)},
            )

        try:
            if isinstance(sink, (str, Path)):
                canvas.output_file(sink)
            else:
                canvas.output(sink)
        except Exception as e:
            logger.debug(f"Failed to write PDF: {e}", exc_info=True)
            raise GenerationError(
                f"Failed to write PDF output: {e}",
                context={"error": str(e), "output": str(sink)},
            ) from e

        self.state = EngineState.FINALIZED
        logger.debug(f"Generated PDF with {canvas.page_no()} pages")

    def generate(self, sink: Sink) -> None:
        """Render the whole report and write it to ``sink``.

        Raises:
            GenerationError: If any stage of generation fails
        """
        self.initialize()
        self.add_page()
        for section in self.report.sections:
            self.render_section(section)
        self.finalize(sink)

"""Public API for generating PDF reports.

``ReportGenerator`` loads a template and data documents and renders them
with a ``ReportEngine``.

Example:
    ```python
    from reportml import ReportGenerator

    generator = ReportGenerator()
    generator.load_template("templates/invoice.xml")
    generator.load_data_from_file("data/invoice.json")
    generator.generate("invoice.pdf")
    ```
"""

import logging
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from reportml.config import Config, get_config
from reportml.engine.engine import ReportEngine
from reportml.exceptions import GenerationError
from reportml.models.report import Report
from reportml.parser.data_parser import parse_data_file, parse_data_string
from reportml.parser.template_parser import (
    parse_template,
    parse_template_bytes,
    parse_template_string,
)

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Loads templates and data and produces PDF output.

    Data loaded through ``load_data_*`` and ``set_data`` is merged into one
    context; a later load overwrites top-level keys of the same name.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()
        self.engine = ReportEngine(self.config)

    @property
    def report(self) -> Report | None:
        return self.engine.report

    @property
    def data(self) -> dict[str, Any]:
        return self.engine.data

    def load_template(self, path: str | Path) -> Report:
        """Load a template from an XML file.

        Raises:
            TemplateParseError: If the file cannot be read or parsed
        """
        report = parse_template(path)
        self.engine.set_report(report)
        logger.debug(f"Loaded template {path}")
        return self.engine.report

    def load_template_from_string(self, text: str) -> Report:
        """Load a template from XML text.

        Raises:
            TemplateParseError: If the text cannot be parsed
        """
        self.engine.set_report(parse_template_string(text))
        return self.engine.report

    def load_template_from_bytes(self, data: bytes) -> Report:
        """Load a template from raw XML bytes.

        Raises:
            TemplateParseError: If the bytes cannot be parsed
        """
        self.engine.set_report(parse_template_bytes(data))
        return self.engine.report

    def load_data_from_file(self, path: str | Path) -> None:
        """Merge a JSON data file into the data context.

        Raises:
            DataParseError: If the file cannot be read or decoded
        """
        self.engine.merge_data(parse_data_file(path))
        logger.debug(f"Loaded data {path}")

    def load_data_from_string(self, text: str) -> None:
        """Merge JSON text into the data context.

        Raises:
            DataParseError: If the text cannot be decoded
        """
        self.engine.merge_data(parse_data_string(text))

    def set_data(self, data: Mapping[str, Any]) -> None:
        """Merge a mapping into the data context."""
        self.engine.merge_data(data)

    def generate(self, output_path: str | Path, data: Mapping[str, Any] | None = None) -> Path:
        """Render the loaded template to a PDF file.

        Args:
            output_path: Destination file
            data: Optional data merged into the context before rendering

        Returns:
            Path of the written file

        Raises:
            GenerationError: If no template is loaded or generation fails
        """
        self._require_template()
        if data is not None:
            self.engine.merge_data(data)
        path = Path(output_path)
        self.engine.generate(path)
        logger.debug(f"Report written to {path}")
        return path

    def generate_to_stream(self, stream: BinaryIO) -> None:
        """Render the loaded template into a binary stream.

        The stream is written but not closed.

        Raises:
            GenerationError: If no template is loaded or generation fails
        """
        self._require_template()
        self.engine.generate(stream)

    def reset(self) -> None:
        """Forget the loaded template and all data."""
        self.engine.reset()

    def _require_template(self) -> None:
        if self.engine.report is None:
            raise GenerationError("No template loaded; call load_template first")

"""reportml: declarative XML report templates rendered to PDF.

A template describes page setup, styles, a header, a footer and ordered
sections of elements; a JSON data document supplies the values its
placeholders and tables refer to.
"""

from reportml.engine.engine import EngineState, ReportEngine
from reportml.exceptions import (
    DataParseError,
    GenerationError,
    ReportError,
    SubstitutionError,
    TemplateParseError,
)
from reportml.generator import ReportGenerator

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ReportGenerator",
    "ReportEngine",
    "EngineState",
    "ReportError",
    "TemplateParseError",
    "DataParseError",
    "SubstitutionError",
    "GenerationError",
]

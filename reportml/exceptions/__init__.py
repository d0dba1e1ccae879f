"""Custom exception classes for reportml.

This package contains the exception hierarchy:
- ReportError: Base exception for all report errors
- TemplateParseError: Raised when a template is malformed
- DataParseError: Raised when a data document is malformed
- SubstitutionError: Raised inside the binder when a placeholder fails
- GenerationError: Raised when PDF generation fails
"""

from reportml.exceptions.base import ReportError
from reportml.exceptions.data_parse_error import DataParseError
from reportml.exceptions.generation_error import GenerationError
from reportml.exceptions.substitution_error import SubstitutionError
from reportml.exceptions.template_parse_error import TemplateParseError

__all__ = [
    "ReportError",
    "TemplateParseError",
    "DataParseError",
    "SubstitutionError",
    "GenerationError",
]

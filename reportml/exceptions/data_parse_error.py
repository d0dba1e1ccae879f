"""Data parse error exception.

Raised when the data document supplied for placeholder substitution cannot
be decoded.
"""

from reportml.exceptions.base import ReportError


class DataParseError(ReportError):
    """Raised when a data document is malformed or not a JSON object."""
    
    pass

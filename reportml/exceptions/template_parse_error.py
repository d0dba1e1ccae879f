"""Template parse error exception.

Raised when template bytes cannot be decoded into a report model. This is
fatal at load time and aborts before any rendering happens.
"""

from reportml.exceptions.base import ReportError


class TemplateParseError(ReportError):
    """Raised when a report template is malformed.
    
    The context usually carries the offending element tag and the source
    line of the construct that failed to decode.
    """
    
    pass

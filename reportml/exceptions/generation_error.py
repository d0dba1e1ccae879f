"""Generation error exception.

This module defines the GenerationError exception raised when the canvas
fails while a document is being produced (unreadable image, write failure,
invalid page geometry).
"""

from reportml.exceptions.base import ReportError


class GenerationError(ReportError):
    """Raised when PDF generation fails.
    
    Aborts the current document. Where the failure can be attributed to a
    specific place in the template, ``section`` and ``element`` name it.
    
    Attributes:
        section: Name of the section being rendered, if known
        element: Kind of the element being rendered, if known
    """
    
    def __init__(
        self,
        message: str,
        context: dict | None = None,
        section: str | None = None,
        element: str | None = None,
    ) -> None:
        """Initialize generation error.
        
        Args:
            message: Human-readable error message
            context: Optional dictionary with additional error context
            section: Name of the section at fault
            element: Kind of the element at fault
        """
        super().__init__(message, context)
        self.section = section
        self.element = element

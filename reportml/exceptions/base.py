"""Base exception class for all report errors.

This module defines the ReportError class that serves as the base for all
custom exceptions raised by reportml. Catching ReportError catches every
load-time and generation-time failure the library reports.
"""


class ReportError(Exception):
    """Base exception for all report errors.
    
    Attributes:
        message: Error message describing what went wrong
        context: Optional dictionary with additional error context
    """
    
    def __init__(
        self,
        message: str,
        context: dict | None = None
    ) -> None:
        """Initialize base report error.
        
        Args:
            message: Human-readable error message
            context: Optional dictionary with additional error context
                (e.g., file path, line number, section name)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        """Return string representation of the error.
        
        Returns:
            Error message string
        """
        return self.message
    
    def __repr__(self) -> str:
        """Return detailed representation of the error.
        
        Returns:
            Detailed error representation including context
        """
        context_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{context_str})"

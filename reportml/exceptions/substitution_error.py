"""Substitution error exception.

Raised inside the data binder when a placeholder expression cannot be
evaluated. The binder catches it and leaves the fragment as written, so it
never reaches library callers.
"""

from reportml.exceptions.base import ReportError


class SubstitutionError(ReportError):
    """Raised when a placeholder helper receives operands it cannot use."""
    
    pass

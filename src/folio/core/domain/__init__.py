"""
Domain models.

Contains the structured error that the evaluator and plugins propagate.
"""

from folio.core.domain.error import ErrorContext, FolioError, Severity

__all__ = [
    "ErrorContext",
    "FolioError",
    "Severity",
]

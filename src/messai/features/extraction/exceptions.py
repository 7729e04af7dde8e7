"""
Custom exceptions for the extraction system.

The extraction core degrades silently on noisy text: a field that cannot be
read is simply absent. These exceptions cover configuration and programming
errors only, plus the thin persistence layer used by the batch scripts.
"""

from typing import Any, Dict, Optional


class ExtractionError(Exception):
    """Base exception for all extraction-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class PatternLibraryError(ExtractionError):
    """Errors related to the field pattern catalog."""
    pass


class UnknownFieldError(PatternLibraryError):
    """Raised when a field name is not in the pattern catalog."""

    def __init__(self, field_name: str):
        message = f"Unknown extraction field: {field_name}"
        super().__init__(message, {"field_name": field_name})


class InvalidPatternError(PatternLibraryError):
    """Raised when a catalog regular expression does not compile."""

    def __init__(self, field_name: str, pattern: str, reason: str):
        message = f"Invalid pattern for field {field_name}"
        details = {
            "field_name": field_name,
            "pattern": pattern,
            "reason": reason
        }
        super().__init__(message, details)


class ConfigurationError(ExtractionError):
    """Raised when pipeline configuration is invalid."""

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class PersistenceError(ExtractionError):
    """Errors raised by the paper repository."""
    pass


class PaperNotFoundError(PersistenceError):
    """Raised when a paper id does not exist."""

    def __init__(self, paper_id: str):
        super().__init__(f"Paper not found: {paper_id}", {"paper_id": paper_id})

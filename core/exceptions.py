"""
Centralized exception hierarchy for export errors.

Structural errors (nothing to export) propagate to the caller and abort the
current export call. Value-level coercion problems are reported through
``FieldFormatWarning`` and never abort an export.
"""


class BCFSleuthError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NoDataError(BCFSleuthError):
    """Raised when the project file collection is empty or missing."""


class EmptyResultError(BCFSleuthError):
    """Raised when project files are present but contain zero topics."""


class FieldFormatWarning(UserWarning):
    """Issued when a value cannot be coerced and a fallback is used instead."""


BCFSleuthException = BCFSleuthError
NoDataException = NoDataError
EmptyResultException = EmptyResultError

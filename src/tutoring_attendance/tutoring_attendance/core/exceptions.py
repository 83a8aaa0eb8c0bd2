from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ScheduleFormatError(ValidationError):
    """Raised when a group pattern or session time cannot be resolved."""


class AlreadyRecordedError(DomainError):
    """Raised when a student already has an attendance record for the day."""

    def __init__(self, message: str, *, student_name: str | None = None):
        super().__init__(message)
        self.student_name = student_name


class StorageError(DomainError):
    """Raised when the persistence layer is unreachable."""

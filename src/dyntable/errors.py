"""Error types raised by the dynamic table engine."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from dyntable.models import FieldError


class DynTableError(Exception):
    """Base class for all engine errors."""

    pass


class ValidationError(DynTableError, ValueError):
    """Raised when input fails validation. Nothing has been written yet.

    Carries every field-level error so callers can report them all at once.
    """

    def __init__(self, errors: List["FieldError"], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None:
            message = "; ".join(error.message for error in self.errors) or "Validation failed"
        super().__init__(message)

    @property
    def fields(self) -> List[str]:
        """Names of the fields that failed validation."""
        return [error.field for error in self.errors]

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        """Build an error holding one field message."""
        from dyntable.models import FieldError

        return cls([FieldError(field=field, message=message)])


class NotFoundError(DynTableError, LookupError):
    """Raised when a table or row id does not exist."""

    pass


class BackingStoreError(DynTableError):
    """Raised when the backing store rejects an operation."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        self.remediation = remediation
        if remediation:
            message = f"{message}. {remediation}"
        super().__init__(message)


class PartialFailureError(BackingStoreError):
    """Raised when a multi-step schema write failed midway.

    The registry always attempts a compensating rollback before raising;
    ``rollback_succeeded`` tells whether the store is back to its prior state.
    """

    def __init__(self, operation: str, cause: Exception, rollback_succeeded: bool):
        self.operation = operation
        self.cause = cause
        self.rollback_succeeded = rollback_succeeded
        outcome = "rollback succeeded" if rollback_succeeded else "rollback FAILED"
        super().__init__(
            f"{operation} failed after a partial write ({cause}); "
            f"a rollback was attempted and {outcome}"
        )

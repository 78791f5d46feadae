"""Validation result models."""

from typing import List
from pydantic import Field

from .base import DynTableBaseModel


class FieldError(DynTableBaseModel):
    """A validation message tied to one field."""

    field: str = Field(description="Column name the message refers to")
    message: str = Field(description="Human readable message")


class ValidationResult(DynTableBaseModel):
    """Outcome of checking a row against a table's columns."""

    errors: List[FieldError] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, field: str, message: str) -> None:
        self.errors.append(FieldError(field=field, message=message))

    def raise_for_errors(self) -> None:
        """Raise a ValidationError carrying every collected error."""
        if self.errors:
            from dyntable.errors import ValidationError

            raise ValidationError(self.errors)

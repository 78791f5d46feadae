"""Core data models for dyntable."""

from .base import DynTableBaseModel, DynTableRecordModel
from .table import Column, ColumnDefinition, ColumnType, TableDefinition
from .row import Row, RowPage
from .validation import FieldError, ValidationResult

__all__ = [
    "DynTableBaseModel",
    "DynTableRecordModel",
    "Column",
    "ColumnDefinition",
    "ColumnType",
    "TableDefinition",
    "Row",
    "RowPage",
    "FieldError",
    "ValidationResult",
]

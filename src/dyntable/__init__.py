"""dyntable - runtime-defined tables over a schema-less store."""

from dyntable.core.engine import DynamicTables, connect
from dyntable.errors import (
    DynTableError,
    ValidationError,
    NotFoundError,
    BackingStoreError,
    PartialFailureError,
)
from dyntable.models import Column, ColumnDefinition, TableDefinition

try:
    from importlib.metadata import version
    __version__ = version("dyntable")
except Exception:
    # Package metadata is not available when running from a source checkout
    __version__ = "0.1.0"

__all__ = [
    "DynamicTables",
    "connect",
    "Column",
    "ColumnDefinition",
    "TableDefinition",
    "DynTableError",
    "ValidationError",
    "NotFoundError",
    "BackingStoreError",
    "PartialFailureError",
]

"""dyntable managers."""

from dyntable.managers.base import EngineContext, BaseManager
from dyntable.managers.schema import SchemaRegistry
from dyntable.managers.validator import RowValidator
from dyntable.managers.rows import RowStore

__all__ = [
    "EngineContext",
    "BaseManager",
    "SchemaRegistry",
    "RowValidator",
    "RowStore",
]

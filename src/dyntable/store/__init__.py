"""Backing store adapters."""

from dyntable.store.base import BackingStore, QueryResult, TABLES, COLUMNS, ROWS
from dyntable.store.sqlite import SQLiteStore
from dyntable.store.rest import RestStore

__all__ = [
    "BackingStore",
    "QueryResult",
    "TABLES",
    "COLUMNS",
    "ROWS",
    "SQLiteStore",
    "RestStore",
]

"""CLI command modules."""

from . import table, row

__all__ = [
    "table",
    "row",
]

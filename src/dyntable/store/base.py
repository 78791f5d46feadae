"""Backing store contract shared by every storage adapter."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Collection names, shared with the hosted backend's tables
TABLES = "custom_tables"
COLUMNS = "custom_table_columns"
ROWS = "custom_table_data"

COLLECTIONS = (TABLES, COLUMNS, ROWS)

# Remediation shown when a collection is missing from the store
MIGRATION_HINT = (
    "The dynamic table collections do not exist. "
    "Run 'dyntable init' (or apply the database migrations) and retry"
)


@dataclass
class QueryResult:
    """Items matching a query plus the exact count ignoring the range.

    Attributes:
        items: Documents inside the requested offset/limit window
        total_count: Number of documents matching the filters
    """
    items: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0


class BackingStore(ABC):
    """Collection-style persistent store.

    Documents are plain dicts with an ``id`` key. Deleting a document from the
    tables collection must cascade to the columns and rows collections whose
    ``table_id`` references it.
    """

    @abstractmethod
    def insert(self, collection: str, doc: Dict[str, Any]) -> str:
        """Insert one document and return its id."""

    @abstractmethod
    def insert_many(self, collection: str, docs: List[Dict[str, Any]]) -> List[str]:
        """Insert several documents as one write, returning their ids in order."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        """Overwrite the given fields of one document."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Delete one document (cascading to dependents). Missing ids are ignored."""

    @abstractmethod
    def delete_where(self, collection: str, filters: Dict[str, Any]) -> int:
        """Delete every document matching the equality filters, returning the count."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> QueryResult:
        """Select documents by equality filters with ordering and an offset/limit range."""

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document by id."""
        result = self.query(collection, filters={"id": doc_id}, limit=1)
        return result.items[0] if result.items else None

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.close()
        return False

"""SQLite-backed store for table definitions, columns and row payloads."""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dyntable.errors import BackingStoreError
from dyntable.store.base import (
    BackingStore,
    QueryResult,
    TABLES,
    COLUMNS,
    ROWS,
    MIGRATION_HINT,
)

logger = logging.getLogger(__name__)

# Known fields per collection; anything else is rejected before building SQL
FIELDS = {
    TABLES: ("id", "name", "description", "is_public", "created_at", "updated_at"),
    COLUMNS: ("id", "table_id", "name", "type", "required", "options", "column_order"),
    ROWS: ("id", "table_id", "data", "created_at", "updated_at"),
}

JSON_FIELDS = {"options", "data"}
BOOL_FIELDS = {"is_public", "required"}

MEMORY = ":memory:"


class SQLiteStore(BackingStore):
    """Backing store kept in a single SQLite file.

    Cascade deletes are enforced by SQLite foreign keys, so deleting a table
    definition removes its columns and rows in the same statement.
    """

    def __init__(self, path: Union[str, Path] = MEMORY, auto_migrate: bool = True):
        """Open (and optionally migrate) the store.

        Args:
            path: Database file path, or ":memory:"
            auto_migrate: Create the collections if they do not exist yet
        """
        self.path = path if path == MEMORY else Path(path)
        self.conn: Optional[sqlite3.Connection] = None
        self._connect()
        if auto_migrate:
            self.migrate()

    def _connect(self) -> None:
        """Connect to the SQLite database."""
        if self.path != MEMORY:
            self.path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(
            str(self.path),
            check_same_thread=False,  # Allow multi-threaded access
            timeout=30.0,
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.execute("PRAGMA journal_mode = WAL")

    def migrate(self) -> None:
        """Create the collections if they don't exist."""
        with self.conn:
            self.conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {TABLES} (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT,
                    is_public BOOLEAN DEFAULT FALSE,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
            """)

            self.conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {COLUMNS} (
                    id TEXT PRIMARY KEY,
                    table_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL,
                    required BOOLEAN DEFAULT FALSE,
                    options JSON,
                    column_order INTEGER NOT NULL DEFAULT 0,
                    FOREIGN KEY (table_id) REFERENCES {TABLES}(id) ON DELETE CASCADE
                )
            """)

            self.conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {ROWS} (
                    id TEXT PRIMARY KEY,
                    table_id TEXT NOT NULL,
                    data JSON NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT,
                    FOREIGN KEY (table_id) REFERENCES {TABLES}(id) ON DELETE CASCADE
                )
            """)

            self.conn.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_columns_table
                ON {COLUMNS}(table_id, column_order)
            """)

            self.conn.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_data_table_created
                ON {ROWS}(table_id, created_at)
            """)
        logger.debug(f"Migrated dynamic table collections in {self.path}")

    @contextmanager
    def _translate_errors(self, collection: str, action: str):
        """Turn sqlite3 errors into BackingStoreError."""
        try:
            yield
        except sqlite3.OperationalError as e:
            if "no such table" in str(e):
                raise BackingStoreError(
                    f"Collection '{collection}' does not exist", MIGRATION_HINT
                ) from e
            raise BackingStoreError(f"Failed to {action} '{collection}': {e}") from e
        except sqlite3.Error as e:
            raise BackingStoreError(f"Failed to {action} '{collection}': {e}") from e

    def _check_fields(self, collection: str, names) -> None:
        allowed = FIELDS.get(collection)
        if allowed is None:
            raise BackingStoreError(f"Unknown collection '{collection}'")
        unknown = [name for name in names if name not in allowed]
        if unknown:
            raise BackingStoreError(
                f"Unknown field(s) for '{collection}': {', '.join(unknown)}"
            )

    def _encode(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        encoded = {}
        for key, value in doc.items():
            if key in JSON_FIELDS and value is not None:
                value = json.dumps(value)
            elif key in BOOL_FIELDS and value is not None:
                value = 1 if value else 0
            encoded[key] = value
        return encoded

    def _decode(self, row: sqlite3.Row) -> Dict[str, Any]:
        doc = dict(row)
        for key in doc.keys() & JSON_FIELDS:
            if doc[key] is not None:
                doc[key] = json.loads(doc[key])
        for key in doc.keys() & BOOL_FIELDS:
            doc[key] = bool(doc[key])
        return doc

    def _build_where_clause(self, filters: Optional[Dict[str, Any]]):
        """Build an AND-ed equality WHERE clause and its parameters."""
        if not filters:
            return "", []

        conditions = []
        params = []
        for key, value in filters.items():
            if value is None:
                conditions.append(f"{key} IS NULL")
            else:
                conditions.append(f"{key} = ?")
                params.append(int(value) if isinstance(value, bool) else value)
        return " WHERE " + " AND ".join(conditions), params

    def _prepare_insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(doc)
        if not record.get("id"):
            record["id"] = str(uuid.uuid4())
        self._check_fields(collection, record.keys())
        return self._encode(record)

    def insert(self, collection: str, doc: Dict[str, Any]) -> str:
        return self.insert_many(collection, [doc])[0]

    def insert_many(self, collection: str, docs: List[Dict[str, Any]]) -> List[str]:
        records = [self._prepare_insert(collection, doc) for doc in docs]
        if not records:
            return []

        with self._translate_errors(collection, "insert into"):
            with self.conn:
                for record in records:
                    columns = list(record.keys())
                    placeholders = ", ".join(f":{col}" for col in columns)
                    self.conn.execute(
                        f"INSERT INTO {collection} ({', '.join(columns)}) VALUES ({placeholders})",
                        record,
                    )
        return [record["id"] for record in records]

    def update(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        changes = {key: value for key, value in doc.items() if key != "id"}
        if not changes:
            return
        self._check_fields(collection, changes.keys())
        params = self._encode(changes)
        set_clause = ", ".join(f"{col} = :{col}" for col in params)
        params["__id"] = doc_id

        with self._translate_errors(collection, "update"):
            with self.conn:
                self.conn.execute(
                    f"UPDATE {collection} SET {set_clause} WHERE id = :__id", params
                )

    def delete(self, collection: str, doc_id: str) -> None:
        self.delete_where(collection, {"id": doc_id})

    def delete_where(self, collection: str, filters: Dict[str, Any]) -> int:
        if not filters:
            raise BackingStoreError(
                "Delete requires at least one filter to prevent accidental deletion of all documents"
            )
        self._check_fields(collection, filters.keys())
        where_clause, params = self._build_where_clause(filters)

        with self._translate_errors(collection, "delete from"):
            with self.conn:
                cursor = self.conn.execute(f"DELETE FROM {collection}{where_clause}", params)
                return cursor.rowcount

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> QueryResult:
        self._check_fields(collection, list((filters or {}).keys()) + ([order_by] if order_by else []))
        where_clause, params = self._build_where_clause(filters)

        direction = "ASC" if ascending else "DESC"
        sql = f"SELECT * FROM {collection}{where_clause}"
        if order_by:
            # rowid breaks ties between documents written in the same instant
            sql += f" ORDER BY {order_by} {direction}, rowid {direction}"
        if limit is not None or offset:
            sql += " LIMIT ?"
            params_page = [limit if limit is not None else -1]
            if offset:
                sql += " OFFSET ?"
                params_page.append(offset)
        else:
            params_page = []

        with self._translate_errors(collection, "query"):
            cursor = self.conn.execute(sql, params + params_page)
            items = [self._decode(row) for row in cursor.fetchall()]
            count_cursor = self.conn.execute(
                f"SELECT COUNT(*) FROM {collection}{where_clause}", params
            )
            total_count = count_cursor.fetchone()[0]

        return QueryResult(items=items, total_count=total_count)

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

"""Tests for SQLiteStore."""

import pytest

from dyntable.errors import BackingStoreError
from dyntable.store.base import TABLES, COLUMNS, ROWS
from dyntable.store.sqlite import SQLiteStore


def _table(table_id, name="Inventory", created_at="2024-01-01T00:00:00+00:00", is_public=False):
    return {
        "id": table_id,
        "name": name,
        "description": None,
        "is_public": is_public,
        "created_at": created_at,
        "updated_at": created_at,
    }


def _row(row_id, table_id, data, created_at):
    return {
        "id": row_id,
        "table_id": table_id,
        "data": data,
        "created_at": created_at,
        "updated_at": created_at,
    }


class TestSQLiteStore:
    """Test the SQLite backing store."""

    def test_insert_and_get(self, store):
        store.insert(TABLES, _table("t1", is_public=True))

        doc = store.get(TABLES, "t1")
        assert doc["name"] == "Inventory"
        assert doc["is_public"] is True
        assert store.get(TABLES, "missing") is None

    def test_insert_generates_id(self, store):
        store.insert(TABLES, _table("t1"))
        row_id = store.insert(ROWS, {"table_id": "t1", "data": {}, "created_at": "x"})
        assert row_id
        assert store.get(ROWS, row_id)["table_id"] == "t1"

    def test_json_fields_round_trip(self, store):
        store.insert(TABLES, _table("t1"))
        store.insert(
            COLUMNS,
            {
                "id": "c1",
                "table_id": "t1",
                "name": "Status",
                "type": "select",
                "required": True,
                "options": ["open", "done"],
                "column_order": 0,
            },
        )
        store.insert(ROWS, _row("r1", "t1", {"Qty": 5, "Tags": ["a"]}, "2024-01-01"))

        column = store.get(COLUMNS, "c1")
        assert column["options"] == ["open", "done"]
        assert column["required"] is True
        assert store.get(ROWS, "r1")["data"] == {"Qty": 5, "Tags": ["a"]}

    def test_insert_many_is_atomic(self, store):
        store.insert(TABLES, _table("t1"))
        docs = [
            {"id": "c1", "table_id": "t1", "name": "A", "type": "text", "column_order": 0},
            # Duplicate primary key fails the whole batch
            {"id": "c1", "table_id": "t1", "name": "B", "type": "text", "column_order": 1},
        ]
        with pytest.raises(BackingStoreError):
            store.insert_many(COLUMNS, docs)

        assert store.query(COLUMNS, filters={"table_id": "t1"}).total_count == 0

    def test_update(self, store):
        store.insert(TABLES, _table("t1"))
        store.update(TABLES, "t1", {"name": "Stock", "is_public": True})

        doc = store.get(TABLES, "t1")
        assert doc["name"] == "Stock"
        assert doc["is_public"] is True

    def test_unknown_field_rejected(self, store):
        with pytest.raises(BackingStoreError, match="Unknown field"):
            store.insert(TABLES, {**_table("t1"), "owner": "me"})
        with pytest.raises(BackingStoreError, match="Unknown field"):
            store.query(TABLES, filters={"name; DROP TABLE x": 1})

    def test_unknown_collection_rejected(self, store):
        with pytest.raises(BackingStoreError, match="Unknown collection"):
            store.query("users")

    def test_delete_cascades(self, store):
        store.insert(TABLES, _table("t1"))
        store.insert(TABLES, _table("t2", name="Other"))
        store.insert(
            COLUMNS,
            {"id": "c1", "table_id": "t1", "name": "A", "type": "text", "column_order": 0},
        )
        store.insert(ROWS, _row("r1", "t1", {"A": 1}, "2024-01-01"))
        store.insert(ROWS, _row("r2", "t2", {"A": 2}, "2024-01-01"))

        store.delete(TABLES, "t1")

        assert store.get(TABLES, "t1") is None
        assert store.get(COLUMNS, "c1") is None
        assert store.get(ROWS, "r1") is None
        assert store.get(ROWS, "r2") is not None

    def test_delete_missing_is_noop(self, store):
        store.delete(TABLES, "missing")
        assert store.delete_where(ROWS, {"table_id": "missing"}) == 0

    def test_delete_where_requires_filters(self, store):
        with pytest.raises(BackingStoreError, match="at least one filter"):
            store.delete_where(ROWS, {})

    def test_query_filters_order_and_range(self, store):
        store.insert(TABLES, _table("t1"))
        for i in range(5):
            store.insert(ROWS, _row(f"r{i}", "t1", {"n": i}, f"2024-01-0{i + 1}T00:00:00+00:00"))

        result = store.query(
            ROWS, filters={"table_id": "t1"}, order_by="created_at", ascending=False,
            offset=2, limit=2,
        )
        assert [item["id"] for item in result.items] == ["r2", "r1"]
        assert result.total_count == 5

        result = store.query(ROWS, filters={"table_id": "t1"}, order_by="created_at", offset=3)
        assert [item["id"] for item in result.items] == ["r3", "r4"]

    def test_query_limit_zero_counts_only(self, store):
        store.insert(TABLES, _table("t1"))
        store.insert(ROWS, _row("r1", "t1", {}, "2024-01-01"))

        result = store.query(ROWS, filters={"table_id": "t1"}, limit=0)
        assert result.items == []
        assert result.total_count == 1

    def test_query_same_timestamp_uses_insert_order(self, store):
        store.insert(TABLES, _table("t1"))
        for i in range(3):
            store.insert(ROWS, _row(f"r{i}", "t1", {}, "2024-01-01T00:00:00+00:00"))

        result = store.query(ROWS, order_by="created_at", ascending=False)
        assert [item["id"] for item in result.items] == ["r2", "r1", "r0"]

    def test_boolean_filter(self, store):
        store.insert(TABLES, _table("t1", is_public=True))
        store.insert(TABLES, _table("t2", is_public=False))

        result = store.query(TABLES, filters={"is_public": True})
        assert [item["id"] for item in result.items] == ["t1"]

    def test_missing_collections_report_migration(self, temp_dir):
        with SQLiteStore(temp_dir / "bare.db", auto_migrate=False) as bare:
            with pytest.raises(BackingStoreError) as exc:
                bare.query(TABLES)

        assert "does not exist" in str(exc.value)
        assert "dyntable init" in exc.value.remediation

    def test_migrate_is_idempotent(self, store):
        store.insert(TABLES, _table("t1"))
        store.migrate()
        assert store.get(TABLES, "t1") is not None

    def test_persists_across_connections(self, temp_dir):
        path = temp_dir / "nested" / "store.db"
        with SQLiteStore(path) as first:
            first.insert(TABLES, _table("t1"))

        with SQLiteStore(path, auto_migrate=False) as second:
            assert second.get(TABLES, "t1")["name"] == "Inventory"

    def test_in_memory(self):
        with SQLiteStore() as memory:
            memory.insert(TABLES, _table("t1"))
            assert memory.query(TABLES).total_count == 1

"""Tests for dyntable models."""

import pytest
from datetime import datetime
from pydantic import ValidationError as PydanticValidationError

from dyntable.errors import ValidationError
from dyntable.models import (
    Column,
    ColumnDefinition,
    TableDefinition,
    Row,
    RowPage,
    ValidationResult,
)


class TestColumn:
    """Test column specifications."""

    def test_defaults(self):
        col = Column(name="Item")
        assert col.type == "text"
        assert col.required is False
        assert col.options is None

    def test_type_alias_normalized(self):
        assert Column(name="Qty", type="INTEGER").type == "number"

    def test_invalid_type(self):
        with pytest.raises(PydanticValidationError):
            Column(name="Qty", type="blob")

    def test_extra_fields_forbidden(self):
        with pytest.raises(PydanticValidationError):
            Column(name="Qty", nullable=True)

    def test_options_only_kept_for_select(self):
        assert Column(name="Status", type="select", options=["a", "b"]).options == ["a", "b"]
        assert Column(name="Status", type="text", options=["a"]).options is None
        assert Column(name="Status", type="select", options=[]).options is None


class TestColumnDefinition:
    """Test persisted column documents."""

    def test_document_round_trip(self):
        col = ColumnDefinition(name="Status", type="select", options=["open"], order=2)
        doc = col.to_document("table-1")

        assert doc["table_id"] == "table-1"
        assert doc["column_order"] == 2
        assert doc["options"] == ["open"]

        restored = ColumnDefinition.from_document(doc)
        assert restored == col

    def test_empty_options_document(self):
        doc = ColumnDefinition(name="Item").to_document("t")
        assert doc["options"] == []
        assert ColumnDefinition.from_document(doc).options is None


class TestTableDefinition:
    """Test table definition documents."""

    def test_to_document_excludes_columns(self):
        table = TableDefinition(name="Inventory", columns=[ColumnDefinition(name="Item")])
        doc = table.to_document()

        assert "columns" not in doc
        assert doc["name"] == "Inventory"
        assert isinstance(doc["created_at"], str)

    def test_from_document_sorts_columns(self):
        table = TableDefinition(name="Inventory")
        cols = [
            ColumnDefinition(name="B", order=1).to_document(table.id),
            ColumnDefinition(name="A", order=0).to_document(table.id),
        ]
        restored = TableDefinition.from_document(table.to_document(), cols)

        assert [c.name for c in restored.columns] == ["A", "B"]
        assert isinstance(restored.created_at, datetime)
        assert restored.get_column("B").order == 1
        assert restored.get_column("missing") is None


class TestRowModels:
    """Test row and page models."""

    def test_flatten_hides_payload_wrapper(self):
        row = Row(table_id="t", data={"Item": "Pen", "id": "spoofed"})
        flat = row.flatten()

        assert flat == {"id": row.id, "Item": "Pen"}

    def test_total_pages(self):
        assert RowPage(rows=[], total=5, page=1, page_size=2).total_pages == 3
        assert RowPage(rows=[], total=4, page=1, page_size=2).total_pages == 2
        assert RowPage(rows=[], total=0, page=1, page_size=2).total_pages == 1

    def test_total_pages_serialized(self):
        dumped = RowPage(rows=[], total=5, page=1, page_size=2).model_dump()
        assert dumped["total_pages"] == 3


class TestValidationResult:
    """Test validation result collection."""

    def test_valid_result(self):
        result = ValidationResult()
        assert result.valid
        result.raise_for_errors()

    def test_raise_for_errors_carries_all_fields(self):
        result = ValidationResult()
        result.add("Item", "Item is required")
        result.add("Qty", "Qty must be a number")

        assert not result.valid
        with pytest.raises(ValidationError) as exc:
            result.raise_for_errors()

        assert exc.value.fields == ["Item", "Qty"]
        assert "Item is required" in str(exc.value)
        assert "Qty must be a number" in str(exc.value)
        # Callers catching ValueError also see it
        assert isinstance(exc.value, ValueError)

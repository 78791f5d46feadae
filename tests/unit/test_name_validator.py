"""Tests for table and column name validation."""

import pytest

from dyntable.errors import ValidationError
from dyntable.utils.name_validator import name_error, validate_name, MAX_NAME_LENGTH


class TestNameValidator:
    """Test name validation rules."""

    def test_free_form_names_allowed(self):
        # Names are display labels, so spaces and punctuation are fine
        for name in ["Inventory", "Sales 2024", "Q&A", "Émile's list", "a-b.c"]:
            assert name_error(name) is None
            validate_name(name)

    def test_blank_names(self):
        assert name_error("") == "Table name is required"
        assert name_error("   ") == "Table name is required"
        assert name_error(None, "column") == "Column name is required"

    def test_too_long(self):
        assert name_error("x" * MAX_NAME_LENGTH) is None
        assert "cannot exceed" in name_error("x" * (MAX_NAME_LENGTH + 1))

    def test_control_characters(self):
        assert "control characters" in name_error("bad\nname")
        assert "control characters" in name_error("bad\x00name")

    def test_reserved_column_name(self):
        assert name_error("id", "column") == "Column name 'id' is reserved"
        assert name_error("ID", "column") is not None
        # Only columns are restricted
        assert name_error("id", "table") is None

    def test_validate_name_raises(self):
        with pytest.raises(ValidationError) as exc:
            validate_name("  ")
        assert exc.value.fields == ["name"]
        assert str(exc.value) == "Table name is required"

"""Tests for column type normalization and value parsing."""

import pytest
from datetime import date, datetime, timezone

from dyntable.utils.type_utils import (
    normalize_type,
    is_blank,
    parse_number,
    parse_date,
    parse_boolean,
)


class TestNormalizeType:
    """Test type alias normalization."""

    def test_canonical_types(self):
        for type_name in ["text", "number", "date", "boolean", "select", "link"]:
            assert normalize_type(type_name) == type_name

    def test_aliases_case_insensitive(self):
        assert normalize_type("INTEGER") == "number"
        assert normalize_type("Float") == "number"
        assert normalize_type("string") == "text"
        assert normalize_type("bool") == "boolean"
        assert normalize_type("timestamp") == "date"
        assert normalize_type("enum") == "select"
        assert normalize_type("url") == "link"
        assert normalize_type("  text  ") == "text"

    def test_unknown_type(self):
        with pytest.raises(ValueError) as exc:
            normalize_type("blob")
        assert "Invalid type: 'blob'" in str(exc.value)
        assert "Valid types:" in str(exc.value)

    def test_empty_type(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            normalize_type("   ")


class TestValueParsing:
    """Test parsing of raw row values."""

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")
        assert not is_blank(0)
        assert not is_blank(False)
        assert not is_blank("x")

    def test_parse_number(self):
        assert parse_number(5) == 5
        assert parse_number("5") == 5
        assert isinstance(parse_number("5.0"), int)
        assert parse_number(" 2.5 ") == 2.5
        assert parse_number("-3") == -3

    def test_parse_number_rejects(self):
        assert parse_number("abc") is None
        assert parse_number(True) is None
        assert parse_number("nan") is None
        assert parse_number("inf") is None
        assert parse_number([1]) is None

    def test_parse_date_iso_string(self):
        parsed = parse_date("2024-01-05")
        assert parsed == datetime(2024, 1, 5, tzinfo=timezone.utc)

    def test_parse_date_zulu_and_offset(self):
        assert parse_date("2024-01-05T10:00:00Z") == datetime(
            2024, 1, 5, 10, tzinfo=timezone.utc
        )
        # Offsets are normalized to UTC
        assert parse_date("2024-01-05T12:00:00+02:00") == datetime(
            2024, 1, 5, 10, tzinfo=timezone.utc
        )

    def test_parse_date_objects(self):
        assert parse_date(date(2024, 1, 5)) == datetime(2024, 1, 5, tzinfo=timezone.utc)
        assert parse_date(datetime(2024, 1, 5, 8)).tzinfo is not None

    def test_parse_date_rejects(self):
        assert parse_date("not a date") is None
        assert parse_date("2024-13-45") is None
        assert parse_date(12345) is None
        assert parse_date("0001-01-01T00:00:00+01:00") is None
        assert parse_date("9999-12-31T23:00:00-02:00") is None

    def test_parse_boolean(self):
        assert parse_boolean(True) is True
        assert parse_boolean("yes") is True
        assert parse_boolean("FALSE") is False
        assert parse_boolean("off") is False
        assert parse_boolean(0) is False
        assert parse_boolean(1) is True

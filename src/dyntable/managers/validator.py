"""Row validation and coercion against a table's column definitions."""

from typing import Any, Dict, Iterable, List, Sequence

from dyntable.models import Column, ValidationResult
from dyntable.utils.type_utils import (
    is_blank,
    parse_boolean,
    parse_date,
    parse_number,
)

# Key owned by the store, never part of a payload
RESERVED_KEYS = {"id"}


class RowValidator:
    """Checks row payloads against columns and produces their stored form.

    Select columns accept any value; membership in ``options`` is not checked.
    """

    def validate(self, row: Dict[str, Any], columns: Sequence[Column]) -> ValidationResult:
        """Check presence of required columns and the type of present values.

        Every failing column contributes an error; checking does not stop at
        the first one.

        Args:
            row: Candidate values keyed by column name
            columns: Column definitions of the target table

        Returns:
            ValidationResult with one FieldError per failing column
        """
        return self._check(row, columns, only_present=False)

    def validate_partial(self, patch: Dict[str, Any], columns: Sequence[Column]) -> ValidationResult:
        """Like validate(), but only for the keys present in ``patch``.

        A key present with a blank value still fails when its column is required.
        """
        return self._check(patch, columns, only_present=True)

    def _check(
        self, row: Dict[str, Any], columns: Iterable[Column], only_present: bool
    ) -> ValidationResult:
        result = ValidationResult()

        for column in columns:
            if only_present and column.name not in row:
                continue

            value = row.get(column.name)
            if is_blank(value):
                if column.required:
                    result.add(column.name, f"{column.name} is required")
                continue

            if column.type == "number" and parse_number(value) is None:
                result.add(column.name, f"{column.name} must be a number")
            elif column.type == "date" and parse_date(value) is None:
                result.add(column.name, f"{column.name} must be a valid date")

        return result

    def coerce(self, row: Dict[str, Any], columns: Sequence[Column]) -> Dict[str, Any]:
        """Produce the canonical stored representation of a row.

        Numbers become int/float, dates become UTC ISO-8601 strings, booleans
        become True/False. Keys without a matching column pass through
        unchanged. Blank values are dropped so stored rows stay sparse.

        Args:
            row: Values keyed by column name (assumed already validated)
            columns: Column definitions of the target table

        Returns:
            New dict holding only non-blank, coerced values
        """
        by_name = {column.name: column for column in columns}
        coerced: Dict[str, Any] = {}

        for key, value in row.items():
            if key in RESERVED_KEYS or is_blank(value):
                continue

            column = by_name.get(key)
            if column is not None:
                value = self._coerce_value(column, value)
            coerced[key] = value

        return coerced

    def blank_keys(self, row: Dict[str, Any]) -> List[str]:
        """Keys whose values are blank, i.e. the ones coerce() would drop."""
        return [key for key, value in row.items() if key not in RESERVED_KEYS and is_blank(value)]

    @staticmethod
    def _coerce_value(column: Column, value: Any) -> Any:
        if column.type == "number":
            number = parse_number(value)
            return value if number is None else number
        if column.type == "date":
            parsed = parse_date(value)
            return value if parsed is None else parsed.isoformat()
        if column.type == "boolean":
            return parse_boolean(value)
        return value

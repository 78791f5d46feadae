"""Type utilities for normalizing column types and row values."""

import math
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Union

# Map various type representations to canonical dyntable column types
TYPE_MAPPING = {
    # Standard canonical names
    "text": "text",
    "number": "number",
    "date": "date",
    "boolean": "boolean",
    "select": "select",
    "link": "link",

    # Common aliases
    "string": "text",
    "str": "text",
    "varchar": "text",
    "int": "number",
    "integer": "number",
    "float": "number",
    "double": "number",
    "real": "number",
    "numeric": "number",
    "datetime": "date",
    "timestamp": "date",
    "bool": "boolean",
    "choice": "select",
    "enum": "select",
    "url": "link",
}

TRUE_STRINGS = {"true", "1", "yes", "on"}
FALSE_STRINGS = {"false", "0", "no", "off"}

Number = Union[int, float]


def normalize_type(type_str: str) -> str:
    """
    Normalize a type string to its canonical dyntable column type.

    Args:
        type_str: The type string to normalize (case-insensitive, supports aliases)

    Returns:
        The canonical type (text, number, date, boolean, select, link)

    Raises:
        ValueError: If the type string is not recognized
    """
    if not type_str or not type_str.strip():
        raise ValueError("Type cannot be empty")

    normalized = TYPE_MAPPING.get(type_str.strip().lower())
    if not normalized:
        valid_types = sorted(set(TYPE_MAPPING.values()))
        raise ValueError(
            f"Invalid type: '{type_str}'. "
            f"Valid types: {', '.join(valid_types)}"
        )
    return normalized


def is_blank(value: Any) -> bool:
    """True for values that count as absent: None and empty/whitespace strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_number(value: Any) -> Optional[Number]:
    """Parse a finite number, returning None when the value is not one.

    Integral values come back as int so stored payloads stay tidy.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date, datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are taken as UTC; date-only values become midnight UTC.
    Returns None when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # Offsets that push year 1 or 9999 out of range
        return None


def parse_boolean(value: Any) -> bool:
    """Read a boolean, understanding common true/false strings."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    return bool(value)

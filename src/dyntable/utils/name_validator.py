"""Name validation utilities for table and column labels.

Table and column names are free-form display labels typed into forms. A name
must be non-blank, fit within MAX_NAME_LENGTH and contain no control characters.
Column names also become payload keys, so a few of them are reserved.
"""

from typing import Optional


MAX_NAME_LENGTH = 255

# Column names that would collide with keys of a flattened row
RESERVED_COLUMN_NAMES = {"id"}


def name_error(name: Optional[str], entity_type: str = "table") -> Optional[str]:
    """Return the problem with a name, or None if it is acceptable.

    Args:
        name: The name to check
        entity_type: Type of entity (table, column) for messages
    """
    label = entity_type.capitalize()

    if name is None or not name.strip():
        return f"{label} name is required"

    if len(name) > MAX_NAME_LENGTH:
        return f"{label} name cannot exceed {MAX_NAME_LENGTH} characters"

    if "\x00" in name or any(ord(c) < 32 for c in name):
        return f"{label} name contains invalid control characters"

    if entity_type == "column" and name.strip().lower() in RESERVED_COLUMN_NAMES:
        return f"Column name '{name}' is reserved"

    return None


def validate_name(name: Optional[str], entity_type: str = "table") -> None:
    """Validate a table or column name.

    Raises:
        ValidationError: If the name is invalid
    """
    problem = name_error(name, entity_type)
    if problem:
        from dyntable.errors import ValidationError

        raise ValidationError.single("name", problem)

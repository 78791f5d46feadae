"""Table and column definition models for dyntable."""

import uuid
from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from .base import DynTableRecordModel
from dyntable.utils.type_utils import normalize_type


# Column types understood by the row validator
ColumnType = Literal["text", "number", "date", "boolean", "select", "link"]


class Column(BaseModel):
    """Column specification supplied by callers when defining a table."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="Column name, also the key used in row payloads")
    type: ColumnType = Field(default="text", description="Declared value type")
    required: bool = Field(
        default=False, description="Whether rows must carry a non-blank value"
    )
    options: Optional[List[str]] = Field(
        default=None, description="Choice list, only kept for select columns"
    )

    @field_validator("type", mode="before")
    @classmethod
    def normalize_column_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_type(value)
        return value

    @model_validator(mode="after")
    def drop_unused_options(self) -> "Column":
        if self.type != "select" or not self.options:
            self.options = None
        return self


class ColumnDefinition(Column):
    """A persisted column belonging to a table definition."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique identifier"
    )
    order: int = Field(default=0, description="Ordinal position within the table")

    def to_document(self, table_id: str) -> Dict[str, Any]:
        """Shape this column for the columns collection."""
        return {
            "id": self.id,
            "table_id": table_id,
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "options": self.options or [],
            "column_order": self.order,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ColumnDefinition":
        options = doc.get("options")
        return cls(
            id=doc["id"],
            name=doc["name"],
            type=doc["type"],
            required=bool(doc.get("required")),
            options=options if isinstance(options, list) else None,
            order=doc.get("column_order") or 0,
        )


class TableDefinition(DynTableRecordModel):
    """A user-defined table: a name plus ordered, typed columns."""

    name: str = Field(description="Table name")
    description: Optional[str] = Field(default=None, description="Free-form description")
    is_public: bool = Field(default=False, description="Whether the table is publicly listed")
    columns: List[ColumnDefinition] = Field(
        default_factory=list, description="Columns in ordinal order"
    )

    def get_column(self, name: str) -> Optional[ColumnDefinition]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def to_document(self) -> Dict[str, Any]:
        """Shape this definition (without its columns) for the tables collection."""
        return self.model_dump(exclude={"columns"})

    @classmethod
    def from_document(
        cls, doc: Dict[str, Any], columns: Optional[List[Dict[str, Any]]] = None
    ) -> "TableDefinition":
        parsed = [ColumnDefinition.from_document(col) for col in columns or []]
        parsed.sort(key=lambda col: col.order)
        return cls(
            id=doc["id"],
            name=doc["name"],
            description=doc.get("description") or None,
            is_public=bool(doc.get("is_public")),
            columns=parsed,
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at"),
        )

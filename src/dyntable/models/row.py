"""Row models for dyntable."""

import math
from typing import Any, Dict, List
from pydantic import Field, computed_field

from .base import DynTableBaseModel, DynTableRecordModel


class Row(DynTableRecordModel):
    """One record of a user-defined table, stored as an opaque payload."""

    table_id: str = Field(description="Owning table definition id")
    data: Dict[str, Any] = Field(default_factory=dict, description="Field values by column name")

    def flatten(self) -> Dict[str, Any]:
        """Return the payload with the row id merged in, hiding the wrapper."""
        flat = {key: value for key, value in self.data.items() if key != "id"}
        return {"id": self.id, **flat}

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()


class RowPage(DynTableBaseModel):
    """One page of flattened rows plus the exact total for the table."""

    rows: List[Dict[str, Any]] = Field(default_factory=list, description="Flattened rows")
    total: int = Field(description="Total rows in the table, independent of the page")
    page: int = Field(description="1-based page number")
    page_size: int = Field(description="Maximum rows per page")

    @computed_field
    @property
    def total_pages(self) -> int:
        """Number of pages needed to show every row (at least 1)."""
        return max(1, math.ceil(self.total / self.page_size))

"""Base models for dyntable."""

from datetime import datetime, timezone
from typing import Optional, Any
import uuid
from pydantic import BaseModel, Field, ConfigDict, field_serializer


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class DynTableRecordModel(BaseModel):
    """Base model for entities persisted as documents in a store collection.

    Includes automatic id, created_at, and updated_at fields.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique identifier"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp",
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utc_now, description="Last update timestamp"
    )

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, dt: Optional[datetime], _info: Any) -> Optional[str]:
        """Serialize datetime to ISO format."""
        return dt.isoformat() if dt else None


class DynTableBaseModel(BaseModel):
    """Base model for non-persisted entities (results, config, etc)."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",
    )

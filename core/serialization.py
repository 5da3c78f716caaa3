"""JSON helpers shared by the trip and ledger serializers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from bson import ObjectId


def serialize_datetime(dt: datetime | None) -> str | None:
    """Serialize a datetime to ISO format for JSON responses."""
    if dt is None:
        return None
    return dt.isoformat()


def serialize_object_id(value: ObjectId | None) -> str | None:
    return str(value) if value is not None else None

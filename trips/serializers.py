"""Serialization utilities for trip data."""

from __future__ import annotations

from typing import Any

from core.serialization import serialize_object_id
from db.models import Trip


def serialize_trip(trip: Trip) -> dict[str, Any]:
    """JSON-ready trip payload with a string ``id`` and derived odometer distance."""
    data = trip.model_dump(mode="json", exclude={"id", "revision_id"})
    data["id"] = serialize_object_id(trip.id)
    data["odometerDistance"] = trip.odometer_distance
    return data


def serialize_trips(trips: list[Trip]) -> list[dict[str, Any]]:
    return [serialize_trip(trip) for trip in trips]

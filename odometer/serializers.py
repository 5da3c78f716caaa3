"""Serialization utilities for odometer ledger data."""

from __future__ import annotations

from typing import Any

from core.serialization import serialize_datetime, serialize_object_id
from db.models import Trip, UserOdometer


def serialize_trip_summary(trip: Trip) -> dict[str, Any]:
    return {
        "id": serialize_object_id(trip.id),
        "purpose": trip.purpose,
        "status": trip.status.value,
        "startTime": serialize_datetime(trip.startTime),
        "startOdometer": trip.startOdometer,
        "startLocation": trip.startLocation,
        "distance": trip.distance,
        "duration": trip.duration,
    }


def serialize_ledger(
    ledger: UserOdometer,
    active_trip: Trip | None = None,
) -> dict[str, Any]:
    """JSON-ready ledger payload.

    ``activeTripDetails`` is only included when the caller resolved the
    pointer; a dangling pointer is reported as ``None``.
    """
    data: dict[str, Any] = {
        "userId": ledger.userId,
        "currentOdometer": ledger.currentOdometer,
        "activeTrip": serialize_object_id(ledger.activeTripId),
        "createdAt": serialize_datetime(ledger.createdAt),
        "updatedAt": serialize_datetime(ledger.updatedAt),
    }
    if active_trip is not None or ledger.activeTripId is not None:
        data["activeTripDetails"] = (
            serialize_trip_summary(active_trip) if active_trip else None
        )
    return data

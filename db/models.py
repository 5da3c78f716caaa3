"""Beanie ODM document models for MongoDB collections.

Usage:
    from db.models import Trip, TripStatus, UserOdometer

    # The user's active trip
    trip = await Trip.find_one(
        Trip.userId == user_id,
        Trip.status == TripStatus.ACTIVE,
    )

    # Insert a new document
    trip = Trip(userId=user_id, purpose="Site visit", startOdometer=1200)
    await trip.insert()
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from core.constants import LOCATION_MAX_LENGTH, PURPOSE_MAX_LENGTH


def utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: Any) -> Any:
    # The driver hands back naive datetimes unless the client is tz-aware.
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class TripStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"


class RoutePoint(BaseModel):
    """A single GPS fix. Immutable once appended to a route."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float = Field(ge=0)
    timestamp: float

    model_config = ConfigDict(frozen=True)


class Trip(Document):
    """One journey owned by one user."""

    userId: str
    purpose: str = Field(max_length=PURPOSE_MAX_LENGTH)
    status: TripStatus = TripStatus.ACTIVE
    startTime: datetime = Field(default_factory=utc_now)
    endTime: datetime | None = None
    startOdometer: float = Field(ge=0)
    endOdometer: float | None = Field(default=None, ge=0)
    startLocation: str | None = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    endLocation: str | None = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    distance: float = Field(default=0.0, ge=0)
    duration: int = Field(default=0, ge=0)
    averageSpeed: float = Field(default=0.0, ge=0)
    route: list[RoutePoint] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)

    @field_validator(
        "startTime",
        "endTime",
        "createdAt",
        "updatedAt",
        mode="before",
    )
    @classmethod
    def ensure_utc(cls, v: Any) -> Any:
        return _as_utc(v)

    @property
    def is_active(self) -> bool:
        return self.status == TripStatus.ACTIVE

    @property
    def odometer_distance(self) -> float:
        """Distance implied by the odometer readings, 0 until the trip ends."""
        if self.endOdometer is None:
            return 0
        return self.endOdometer - self.startOdometer

    class Settings:
        name = "trips"
        indexes = [
            IndexModel(
                [("userId", ASCENDING), ("createdAt", DESCENDING)],
                name="trips_user_created_idx",
            ),
            IndexModel(
                [("userId", ASCENDING), ("status", ASCENDING)],
                name="trips_user_status_idx",
            ),
        ]


class UserOdometer(Document):
    """Per-user running odometer total and pointer to the active trip."""

    userId: Indexed(str, unique=True)
    currentOdometer: float = Field(default=0.0, ge=0)
    activeTripId: PydanticObjectId | None = None
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)

    @field_validator("createdAt", "updatedAt", mode="before")
    @classmethod
    def ensure_utc(cls, v: Any) -> Any:
        return _as_utc(v)

    class Settings:
        name = "user_odometers"


# List of all document models for Beanie initialization
ALL_DOCUMENT_MODELS = [
    Trip,
    UserOdometer,
]

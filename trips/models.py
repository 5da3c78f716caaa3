"""Pydantic request models for trip API operations.

Field types are loose: the lifecycle service owns validation
and reports problems as 400s with a readable message.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class StartTripRequest(BaseModel):
    purpose: Any = None
    startOdometer: Any = None
    route: list[Any] | None = None

    model_config = ConfigDict(extra="ignore")


class RoutePointRequest(BaseModel):
    latitude: Any = None
    longitude: Any = None
    accuracy: Any = None
    timestamp: Any = None

    model_config = ConfigDict(extra="ignore")


class BulkRoutePointsRequest(BaseModel):
    points: list[Any] | None = None

    model_config = ConfigDict(extra="ignore")


class TripUpdateRequest(BaseModel):
    route: list[Any] | None = None
    startLocation: str | None = None
    endLocation: str | None = None

    model_config = ConfigDict(extra="ignore")


class EndTripRequest(BaseModel):
    """``endOdometer`` is accepted for client compatibility and ignored."""

    endOdometer: Any = None
    endLocation: str | None = None

    model_config = ConfigDict(extra="ignore")

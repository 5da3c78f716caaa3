"""API routes for trip start, lookup, update, end and delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from core.api import api_route
from core.auth import get_current_user_id
from trips.dependencies import get_trip_lifecycle
from trips.models import EndTripRequest, StartTripRequest, TripUpdateRequest
from trips.serializers import serialize_trip
from trips.services import TripLifecycleService, TripQueryService

logger = logging.getLogger(__name__)
router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]
Lifecycle = Annotated[TripLifecycleService, Depends(get_trip_lifecycle)]


@router.post(
    "/api/trips",
    status_code=status.HTTP_201_CREATED,
    tags=["Trips API"],
)
@api_route(logger)
async def start_trip(payload: StartTripRequest, user_id: UserId, lifecycle: Lifecycle):
    """Start a new trip for the caller."""
    trip = await lifecycle.start_trip(
        user_id,
        payload.purpose,
        payload.startOdometer,
        initial_route=payload.route,
    )
    return {"success": True, "data": serialize_trip(trip)}


@router.get("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def get_single_trip(trip_id: str, user_id: UserId):
    """Get one of the caller's trips."""
    trip = await TripQueryService.get_trip(user_id, trip_id)
    return {"success": True, "data": serialize_trip(trip)}


@router.put("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def update_trip(
    trip_id: str,
    payload: TripUpdateRequest,
    user_id: UserId,
    lifecycle: Lifecycle,
):
    """Replace the route or location labels of a trip that is still active."""
    trip = await lifecycle.update_trip(
        user_id,
        trip_id,
        route=payload.route,
        start_location=payload.startLocation,
        end_location=payload.endLocation,
    )
    return {"success": True, "data": serialize_trip(trip)}


@router.put("/api/trips/{trip_id}/end", tags=["Trips API"])
@api_route(logger)
async def end_trip(
    trip_id: str,
    payload: EndTripRequest,
    user_id: UserId,
    lifecycle: Lifecycle,
):
    """End an active trip. The final odometer is always computed server-side."""
    if payload.endOdometer is not None:
        logger.debug("Ignoring client endOdometer for trip %s", trip_id)
    trip = await lifecycle.end_trip(
        user_id,
        trip_id,
        end_location=payload.endLocation,
    )
    return {"success": True, "data": serialize_trip(trip)}


@router.delete("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def delete_trip(trip_id: str, user_id: UserId, lifecycle: Lifecycle):
    """Delete one of the caller's trips, active or completed."""
    await lifecycle.delete_trip(user_id, trip_id)
    return {"success": True, "message": "Trip deleted successfully"}

"""API routes for trip listing and lookup."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from core.api import api_route
from core.auth import get_current_user_id
from core.constants import DEFAULT_PAGE_SIZE
from trips.serializers import serialize_trip, serialize_trips
from trips.services import TripQueryService

logger = logging.getLogger(__name__)
router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]


@router.get("/api/trips", tags=["Trips API"])
@api_route(logger)
async def list_trips(
    user_id: UserId,
    status: Annotated[str | None, Query(description="active or completed")] = None,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_PAGE_SIZE,
    page: Annotated[int, Query(ge=1)] = 1,
):
    """Page through the caller's trips, newest first."""
    result = await TripQueryService.list_trips(
        user_id,
        status=status,
        limit=limit,
        page=page,
    )
    trips = result["trips"]
    return {
        "success": True,
        "count": len(trips),
        "total": result["total"],
        "page": result["page"],
        "pages": result["pages"],
        "data": serialize_trips(trips),
    }


@router.get("/api/trips/active", tags=["Trips API"])
@api_route(logger)
async def get_active_trip(user_id: UserId):
    """Get the caller's active trip."""
    trip = await TripQueryService.get_active_trip(user_id)
    return {"success": True, "data": serialize_trip(trip)}

"""API routes for appending GPS fixes to the active trip."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from core.api import api_route
from core.auth import get_current_user_id
from core.exceptions import ValidationError
from trips.dependencies import get_trip_lifecycle
from trips.models import BulkRoutePointsRequest, RoutePointRequest
from trips.serializers import serialize_trip
from trips.services import TripLifecycleService

logger = logging.getLogger(__name__)
router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]
Lifecycle = Annotated[TripLifecycleService, Depends(get_trip_lifecycle)]


@router.post("/api/trips/active/route", tags=["Trips API"])
@api_route(logger)
async def add_route_point(
    payload: RoutePointRequest,
    user_id: UserId,
    lifecycle: Lifecycle,
):
    """Append one fix to the caller's active trip."""
    trip = await lifecycle.append_fix(user_id, payload.model_dump())
    return {"success": True, "data": serialize_trip(trip)}


@router.post("/api/trips/active/route/bulk", tags=["Trips API"])
@api_route(logger)
async def add_route_points_bulk(
    payload: BulkRoutePointsRequest,
    user_id: UserId,
    lifecycle: Lifecycle,
):
    """Append a batch of fixes; malformed entries are skipped."""
    if not payload.points:
        msg = "Provide non-empty points array"
        raise ValidationError(msg)
    trip, added = await lifecycle.append_fixes(user_id, payload.points)
    return {"success": True, "data": serialize_trip(trip), "added": added}

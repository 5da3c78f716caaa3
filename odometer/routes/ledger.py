"""API routes for the caller's odometer ledger."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from core.api import api_route
from core.auth import get_current_user_id
from core.exceptions import ValidationError
from odometer.models import (
    ActiveTripRequest,
    OdometerUpdateRequest,
    UserDataUpdateRequest,
)
from odometer.serializers import serialize_ledger
from odometer.services import OdometerLedgerService

logger = logging.getLogger(__name__)
router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]


@router.get("/api/userdata", tags=["Odometer API"])
@api_route(logger)
async def get_user_data(user_id: UserId):
    """Get the caller's ledger along with a summary of the active trip."""
    ledger = await OdometerLedgerService.get_or_create(user_id)
    active_trip = await OdometerLedgerService.active_trip_for(ledger)
    return {"success": True, "data": serialize_ledger(ledger, active_trip)}


@router.put("/api/userdata", tags=["Odometer API"])
@api_route(logger)
async def update_user_data(payload: UserDataUpdateRequest, user_id: UserId):
    """Merge ``currentOdometer`` and/or ``activeTrip`` into the ledger."""
    changes = {}
    if "currentOdometer" in payload.model_fields_set:
        changes["current_odometer"] = payload.currentOdometer
    if "activeTrip" in payload.model_fields_set:
        changes["active_trip_id"] = payload.activeTrip
    ledger = await OdometerLedgerService.update_state(user_id, **changes)
    return {"success": True, "data": serialize_ledger(ledger)}


@router.put("/api/userdata/odometer", tags=["Odometer API"])
@api_route(logger)
async def update_odometer(payload: OdometerUpdateRequest, user_id: UserId):
    """Overwrite the caller's running odometer total."""
    ledger = await OdometerLedgerService.set_odometer(user_id, payload.currentOdometer)
    logger.info("Odometer for user %s set to %s", user_id, ledger.currentOdometer)
    return {"success": True, "data": serialize_ledger(ledger)}


@router.put("/api/userdata/active-trip", tags=["Odometer API"])
@api_route(logger)
async def set_active_trip(payload: ActiveTripRequest, user_id: UserId):
    """Point the ledger at a trip."""
    if payload.tripId is None:
        msg = "tripId is required"
        raise ValidationError(msg)
    ledger = await OdometerLedgerService.set_active_trip(user_id, payload.tripId)
    return {"success": True, "data": serialize_ledger(ledger)}


@router.delete("/api/userdata/active-trip", tags=["Odometer API"])
@api_route(logger)
async def clear_active_trip(user_id: UserId):
    """Clear the ledger's active trip pointer."""
    ledger = await OdometerLedgerService.clear_active_trip(user_id)
    return {"success": True, "data": serialize_ledger(ledger)}

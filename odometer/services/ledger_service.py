"""Per-user odometer ledger and the reconciliation protocol.

The trip lifecycle never writes ledger documents directly. It emits one of
three instructions and hands it to :meth:`OdometerLedgerService.apply`:

* :class:`RaiseFloor` on start: point at the new trip, and lift the running
  total to the trip's starting odometer if it is behind (never lowers it).
* :class:`SetLive` on every fix append: overwrite the running total with the
  live estimate. Last writer wins.
* :class:`Finalize` on end: add the trip's rounded distance and clear the
  active trip pointer.

A user without a ledger document gets one (odometer 0, no active trip)
before any instruction is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from beanie import PydanticObjectId
from beanie.odm.queries.update import UpdateResponse
from beanie.operators import Inc, Max, Set
from pymongo.errors import DuplicateKeyError

from core.exceptions import ValidationError
from core.spatial import GeometryService
from db.models import Trip, UserOdometer, utc_now
from db.operations import parse_object_id, persistence_guard

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class RaiseFloor:
    user_id: str
    trip_id: PydanticObjectId
    value: float


@dataclass(frozen=True)
class SetLive:
    user_id: str
    value: float


@dataclass(frozen=True)
class Finalize:
    user_id: str
    increment_by: int


Reconciliation = RaiseFloor | SetLive | Finalize


def _validate_odometer(value: Any) -> float:
    if not GeometryService.is_finite_number(value) or value < 0:
        msg = "Valid odometer reading is required"
        raise ValidationError(msg, {"currentOdometer": value})
    return float(value)


class OdometerLedgerService:
    """Reads and reconciles each user's running odometer state."""

    @staticmethod
    async def get_or_create(user_id: str) -> UserOdometer:
        """Fetch the user's ledger, creating an empty one on first access."""
        with persistence_guard("ledger lookup"):
            ledger = await UserOdometer.find_one(UserOdometer.userId == user_id)
            if ledger is not None:
                return ledger
            ledger = UserOdometer(userId=user_id)
            try:
                await ledger.insert()
            except DuplicateKeyError:
                # Lost a creation race with another request for this user
                ledger = await UserOdometer.find_one(UserOdometer.userId == user_id)
        logger.debug("Created odometer ledger for user %s", user_id)
        return ledger

    @staticmethod
    async def _update(
        user_id: str,
        set_fields: dict[Any, Any],
        *operators: Any,
    ) -> UserOdometer:
        # One operator per update verb: a second Set would replace the first.
        await OdometerLedgerService.get_or_create(user_id)
        with persistence_guard("ledger update"):
            return await UserOdometer.find_one(UserOdometer.userId == user_id).update(
                Set({**set_fields, UserOdometer.updatedAt: utc_now()}),
                *operators,
                response_type=UpdateResponse.NEW_DOCUMENT,
            )

    @staticmethod
    async def apply(instruction: Reconciliation) -> UserOdometer:
        """Apply one reconciliation instruction emitted by the trip lifecycle."""
        match instruction:
            case RaiseFloor(user_id=user_id, trip_id=trip_id, value=value):
                return await OdometerLedgerService._update(
                    user_id,
                    {UserOdometer.activeTripId: trip_id},
                    Max({UserOdometer.currentOdometer: value}),
                )
            case SetLive(user_id=user_id, value=value):
                return await OdometerLedgerService._update(
                    user_id,
                    {UserOdometer.currentOdometer: value},
                )
            case Finalize(user_id=user_id, increment_by=increment_by):
                return await OdometerLedgerService._update(
                    user_id,
                    {UserOdometer.activeTripId: None},
                    Inc({UserOdometer.currentOdometer: increment_by}),
                )
        msg = f"Unknown reconciliation instruction: {instruction!r}"
        raise TypeError(msg)

    @staticmethod
    async def sync_active_trip(user_id: str, trip_id: PydanticObjectId) -> bool:
        """Point the ledger at ``trip_id`` if it drifted. Returns True on repair."""
        ledger = await OdometerLedgerService.get_or_create(user_id)
        if ledger.activeTripId == trip_id:
            return False
        logger.warning(
            "Ledger for user %s pointed at %s instead of active trip %s; repairing",
            user_id,
            ledger.activeTripId,
            trip_id,
        )
        await OdometerLedgerService._update(
            user_id,
            {UserOdometer.activeTripId: trip_id},
        )
        return True

    @staticmethod
    async def update_state(
        user_id: str,
        *,
        current_odometer: Any = _UNSET,
        active_trip_id: Any = _UNSET,
    ) -> UserOdometer:
        """Upsert-merge the ledger; fields left unset are not touched."""
        changes: dict[Any, Any] = {}
        if current_odometer is not _UNSET:
            changes[UserOdometer.currentOdometer] = _validate_odometer(
                current_odometer,
            )
        if active_trip_id is not _UNSET:
            if active_trip_id is None:
                changes[UserOdometer.activeTripId] = None
            else:
                trip_oid = parse_object_id(active_trip_id)
                if trip_oid is None:
                    msg = "Invalid trip id"
                    raise ValidationError(msg, {"activeTrip": active_trip_id})
                changes[UserOdometer.activeTripId] = trip_oid

        if not changes:
            return await OdometerLedgerService.get_or_create(user_id)
        return await OdometerLedgerService._update(user_id, changes)

    @staticmethod
    async def set_odometer(user_id: str, value: Any) -> UserOdometer:
        return await OdometerLedgerService.update_state(
            user_id,
            current_odometer=value,
        )

    @staticmethod
    async def set_active_trip(user_id: str, trip_id: str) -> UserOdometer:
        return await OdometerLedgerService.update_state(
            user_id,
            active_trip_id=trip_id,
        )

    @staticmethod
    async def clear_active_trip(user_id: str) -> UserOdometer:
        return await OdometerLedgerService.update_state(user_id, active_trip_id=None)

    @staticmethod
    async def active_trip_for(ledger: UserOdometer) -> Trip | None:
        """Resolve the ledger's active trip pointer, if it still names a trip."""
        if ledger.activeTripId is None:
            return None
        with persistence_guard("active trip lookup"):
            return await Trip.find_one(
                Trip.id == ledger.activeTripId,
                Trip.userId == ledger.userId,
            )

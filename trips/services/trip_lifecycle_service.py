"""Trip lifecycle: start, append fixes, end, update and delete.

A trip moves ``active -> completed`` exactly once. Every mutation for a user
runs under that user's lock, recomputes the trip metrics explicitly, saves
the trip, and only then hands a reconciliation instruction to the odometer
ledger. Ledger failures are logged and never undo the saved trip.

Reverse geocoding happens before the lock is taken and can only ever leave a
location label empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from core.clients.nominatim import PlaceNamer, place_namer
from core.constants import LOCATION_MAX_LENGTH, PURPOSE_MAX_LENGTH, PURPOSE_MIN_LENGTH
from core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from core.spatial import GeometryService
from db.models import RoutePoint, Trip, TripStatus, utc_now
from db.operations import parse_object_id, persistence_guard
from odometer.services.ledger_service import (
    Finalize,
    OdometerLedgerService,
    RaiseFloor,
    Reconciliation,
    SetLive,
)
from trips.services.trip_metrics import compute_metrics, round_distance
from trips.services.user_locks import UserLockRegistry, user_locks

logger = logging.getLogger(__name__)

FIX_FIELDS = ("latitude", "longitude", "accuracy", "timestamp")

_UNSET: Any = object()


def parse_fix(raw: Any) -> RoutePoint | None:
    """Build a RoutePoint from a mapping of numbers, or None if malformed."""
    if isinstance(raw, RoutePoint):
        return raw
    if not isinstance(raw, Mapping):
        return None
    values = [raw.get(field) for field in FIX_FIELDS]
    if not all(GeometryService.is_finite_number(value) for value in values):
        return None
    latitude, longitude, accuracy, timestamp = values
    if not GeometryService.validate_lat_lon(latitude, longitude) or accuracy < 0:
        return None
    return RoutePoint(
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        timestamp=timestamp,
    )


def parse_route(raw_route: Iterable[Any]) -> list[RoutePoint]:
    """Parse a full route; any malformed fix rejects the whole route."""
    route: list[RoutePoint] = []
    for index, raw in enumerate(raw_route):
        fix = parse_fix(raw)
        if fix is None:
            msg = f"Invalid route point at index {index}"
            raise ValidationError(msg, {"index": index})
        route.append(fix)
    return route


def _clean_purpose(purpose: Any) -> str:
    text = purpose.strip() if isinstance(purpose, str) else ""
    if not text:
        msg = "Please provide purpose and start odometer reading"
        raise ValidationError(msg, {"field": "purpose"})
    if not PURPOSE_MIN_LENGTH <= len(text) <= PURPOSE_MAX_LENGTH:
        msg = (
            f"Purpose must be between {PURPOSE_MIN_LENGTH} and "
            f"{PURPOSE_MAX_LENGTH} characters long"
        )
        raise ValidationError(msg, {"field": "purpose"})
    return text


def _clean_location(location: Any, field: str) -> str | None:
    if location is None:
        return None
    if not isinstance(location, str):
        msg = f"{field} must be a string"
        raise ValidationError(msg, {"field": field})
    text = location.strip()
    if len(text) > LOCATION_MAX_LENGTH:
        msg = f"{field} cannot exceed {LOCATION_MAX_LENGTH} characters"
        raise ValidationError(msg, {"field": field})
    return text or None


def _clip_place_name(name: Any) -> str | None:
    if not isinstance(name, str):
        return None
    return name.strip()[:LOCATION_MAX_LENGTH] or None


class TripLifecycleService:
    """Owns the trip state machine and emits ledger reconciliation."""

    def __init__(
        self,
        namer: PlaceNamer | None = None,
        ledger: type[OdometerLedgerService] = OdometerLedgerService,
        locks: UserLockRegistry | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.namer = namer if namer is not None else place_namer
        self.ledger = ledger
        self.locks = locks if locks is not None else user_locks
        self.clock = clock

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def recompute_metrics(trip: Trip) -> Trip:
        """Refresh distance, duration and average speed from route + end time."""
        metrics = compute_metrics(trip.route, trip.startTime, trip.endTime)
        trip.distance = metrics.distance_km
        trip.duration = metrics.duration_sec
        trip.averageSpeed = metrics.avg_speed_kmh
        return trip

    async def _label(self, fix: RoutePoint | None) -> str | None:
        if fix is None:
            return None
        try:
            name = await self.namer.name_for(fix.latitude, fix.longitude)
            return _clip_place_name(name)
        except Exception as exc:
            logger.warning("Place lookup failed: %s", exc)
            return None

    async def _reconcile(self, instruction: Reconciliation) -> None:
        try:
            await self.ledger.apply(instruction)
        except Exception:
            logger.warning(
                "Ledger reconciliation failed for %s",
                instruction,
                exc_info=True,
            )

    async def _save(self, trip: Trip, operation: str) -> Trip:
        trip.updatedAt = self.clock()
        with persistence_guard(operation):
            await trip.save()
        return trip

    @staticmethod
    async def find_active_trip(user_id: str) -> Trip | None:
        with persistence_guard("active trip lookup"):
            return await Trip.find_one(
                Trip.userId == user_id,
                Trip.status == TripStatus.ACTIVE,
            )

    @staticmethod
    async def find_user_trip(user_id: str, trip_id: str) -> Trip | None:
        trip_oid = parse_object_id(trip_id)
        if trip_oid is None:
            return None
        with persistence_guard("trip lookup"):
            return await Trip.find_one(Trip.id == trip_oid, Trip.userId == user_id)

    async def _require_active_trip(self, user_id: str) -> Trip:
        trip = await self.find_active_trip(user_id)
        if trip is None:
            msg = "No active trip found"
            raise ResourceNotFoundError(msg, {"user_id": user_id})
        return trip

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start_trip(
        self,
        user_id: str,
        purpose: Any,
        start_odometer: Any,
        initial_route: Iterable[Any] | None = None,
    ) -> Trip:
        clean_purpose = _clean_purpose(purpose)
        if not GeometryService.is_finite_number(start_odometer) or start_odometer < 0:
            msg = "Odometer reading cannot be negative"
            raise ValidationError(msg, {"field": "startOdometer"})
        route = parse_route(initial_route or [])

        start_location = await self._label(route[0] if route else None)

        async with self.locks.hold(user_id):
            if await self.find_active_trip(user_id) is not None:
                msg = (
                    "You already have an active trip. "
                    "Please end it before starting a new one."
                )
                raise ConflictError(msg, {"user_id": user_id})

            now = self.clock()
            trip = Trip(
                userId=user_id,
                purpose=clean_purpose,
                status=TripStatus.ACTIVE,
                startTime=now,
                startOdometer=float(start_odometer),
                startLocation=start_location,
                route=route,
                createdAt=now,
                updatedAt=now,
            )
            self.recompute_metrics(trip)
            with persistence_guard("trip start"):
                await trip.insert()
            logger.info("Started trip %s for user %s", trip.id, user_id)

            await self._reconcile(
                RaiseFloor(user_id=user_id, trip_id=trip.id, value=trip.startOdometer),
            )
        return trip

    async def append_fixes(
        self,
        user_id: str,
        fixes: Iterable[Any],
    ) -> tuple[Trip, int]:
        """Append the well-formed fixes of a batch; malformed entries are dropped.

        Returns the saved trip and the number of fixes accepted.
        """
        raw_fixes = list(fixes)
        accepted = [fix for fix in map(parse_fix, raw_fixes) if fix is not None]
        dropped = len(raw_fixes) - len(accepted)

        async with self.locks.hold(user_id):
            trip = await self._require_active_trip(user_id)
            if not accepted:
                msg = "No valid points provided"
                raise ValidationError(msg, {"submitted": len(raw_fixes)})
            if dropped:
                logger.warning(
                    "Dropped %d malformed fixes for trip %s",
                    dropped,
                    trip.id,
                )
            trip.route = [*trip.route, *accepted]
            return await self._commit_route_append(trip, user_id), len(accepted)

    async def append_fix(self, user_id: str, fix: Any) -> Trip:
        point = parse_fix(fix)
        if point is None:
            msg = "Please provide latitude, longitude, accuracy, and timestamp"
            raise ValidationError(msg, {"fix": fix})

        async with self.locks.hold(user_id):
            trip = await self._require_active_trip(user_id)
            trip.route = [*trip.route, point]
            return await self._commit_route_append(trip, user_id)

    async def _commit_route_append(self, trip: Trip, user_id: str) -> Trip:
        self.recompute_metrics(trip)
        await self._save(trip, "route append")

        try:
            await self.ledger.sync_active_trip(user_id, trip.id)
        except Exception:
            logger.warning(
                "Failed to sync active trip pointer for user %s",
                user_id,
                exc_info=True,
            )
        live_odometer = trip.startOdometer + round_distance(trip.distance)
        await self._reconcile(SetLive(user_id=user_id, value=live_odometer))
        return trip

    async def end_trip(
        self,
        user_id: str,
        trip_id: str,
        end_location: Any = None,
    ) -> Trip:
        clean_end_location = _clean_location(end_location, "endLocation")

        if clean_end_location is None:
            snapshot = await self.find_user_trip(user_id, trip_id)
            if snapshot is not None and snapshot.is_active and snapshot.route:
                clean_end_location = await self._label(snapshot.route[-1])

        async with self.locks.hold(user_id):
            trip = await self.find_user_trip(user_id, trip_id)
            if trip is None or not trip.is_active:
                msg = "Active trip not found"
                raise ResourceNotFoundError(msg, {"trip_id": trip_id})

            # Mongo keeps millisecond precision; end must stay after start.
            trip.endTime = max(
                self.clock(),
                trip.startTime + timedelta(milliseconds=1),
            )
            self.recompute_metrics(trip)
            rounded_distance = round_distance(trip.distance)
            trip.endOdometer = trip.startOdometer + rounded_distance
            trip.status = TripStatus.COMPLETED
            if clean_end_location:
                trip.endLocation = clean_end_location
            await self._save(trip, "trip end")
            logger.info(
                "Ended trip %s for user %s: %.3f km, %d s",
                trip.id,
                user_id,
                trip.distance,
                trip.duration,
            )

            await self._reconcile(
                Finalize(user_id=user_id, increment_by=rounded_distance),
            )
        return trip

    async def update_trip(
        self,
        user_id: str,
        trip_id: str,
        *,
        route: Any = _UNSET,
        start_location: Any = None,
        end_location: Any = None,
    ) -> Trip:
        """Replace route and/or location labels of a trip that is still active."""
        new_route = None if route is _UNSET or route is None else parse_route(route)
        clean_start = _clean_location(start_location, "startLocation")
        clean_end = _clean_location(end_location, "endLocation")

        async with self.locks.hold(user_id):
            trip = await self.find_user_trip(user_id, trip_id)
            if trip is None:
                msg = "Trip not found"
                raise ResourceNotFoundError(msg, {"trip_id": trip_id})
            if not trip.is_active:
                msg = "Cannot update completed trip"
                raise ConflictError(msg, {"trip_id": trip_id})

            if new_route is not None:
                trip.route = new_route
            # A provided blank label clears the field.
            if start_location is not None:
                trip.startLocation = clean_start
            if end_location is not None:
                trip.endLocation = clean_end
            self.recompute_metrics(trip)
            return await self._save(trip, "trip update")

    async def delete_trip(self, user_id: str, trip_id: str) -> None:
        """Remove a trip in any state. The ledger is not touched."""
        async with self.locks.hold(user_id):
            trip = await self.find_user_trip(user_id, trip_id)
            if trip is None:
                msg = "Trip not found"
                raise ResourceNotFoundError(msg, {"trip_id": trip_id})
            with persistence_guard("trip delete"):
                await trip.delete()
        logger.info("Deleted trip %s for user %s", trip_id, user_id)

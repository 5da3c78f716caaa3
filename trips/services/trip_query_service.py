"""Read-side trip queries, always scoped to the owning user."""

from __future__ import annotations

import logging
import math
from typing import Any

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.exceptions import ResourceNotFoundError, ValidationError
from db.models import Trip, TripStatus
from db.operations import persistence_guard
from trips.services.trip_lifecycle_service import TripLifecycleService

logger = logging.getLogger(__name__)


class TripQueryService:
    """Service class for fetching and listing trips."""

    @staticmethod
    async def get_trip(user_id: str, trip_id: str) -> Trip:
        trip = await TripLifecycleService.find_user_trip(user_id, trip_id)
        if trip is None:
            msg = "Trip not found"
            raise ResourceNotFoundError(msg, {"trip_id": trip_id})
        return trip

    @staticmethod
    async def get_active_trip(user_id: str) -> Trip:
        trip = await TripLifecycleService.find_active_trip(user_id)
        if trip is None:
            msg = "No active trip found"
            raise ResourceNotFoundError(msg, {"user_id": user_id})
        return trip

    @staticmethod
    async def list_trips(
        user_id: str,
        *,
        status: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> dict[str, Any]:
        """Newest-first page of the user's trips, optionally filtered by status.

        Returns:
            Dict with ``trips``, ``total``, ``page``, ``pages`` and ``limit``.
        """
        if limit < 1 or limit > MAX_PAGE_SIZE:
            msg = f"limit must be between 1 and {MAX_PAGE_SIZE}"
            raise ValidationError(msg, {"limit": limit})
        if page < 1:
            msg = "page must be 1 or greater"
            raise ValidationError(msg, {"page": page})

        filters: list[Any] = [Trip.userId == user_id]
        if status:
            try:
                filters.append(Trip.status == TripStatus(status))
            except ValueError as e:
                msg = f"Unknown trip status: {status}"
                raise ValidationError(msg, {"status": status}) from e

        with persistence_guard("trip listing"):
            total = await Trip.find(*filters).count()
            trips = (
                await Trip.find(*filters)
                .sort(-Trip.createdAt)
                .skip((page - 1) * limit)
                .limit(limit)
                .to_list()
            )

        return {
            "trips": trips,
            "total": total,
            "page": page,
            "pages": math.ceil(total / limit),
            "limit": limit,
        }

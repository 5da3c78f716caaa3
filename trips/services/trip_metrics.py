"""Distance, duration and speed for a trip route.

Pure functions only. Every operation that changes a trip's route or end time
must call :func:`compute_metrics` again so the stored figures never go stale.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from core.constants import AVERAGE_SPEED_FACTOR
from core.spatial import GeometryService
from db.models import RoutePoint


@dataclass(frozen=True)
class TripMetrics:
    distance_km: float
    duration_sec: int
    avg_speed_kmh: float


def route_distance_km(route: Sequence[RoutePoint]) -> float:
    """Sum of haversine distances between consecutive fixes."""
    if len(route) < 2:
        return 0.0
    return sum(
        GeometryService.haversine_distance(
            prev.latitude,
            prev.longitude,
            curr.latitude,
            curr.longitude,
        )
        for prev, curr in zip(route, route[1:], strict=False)
    )


def compute_metrics(
    route: Sequence[RoutePoint],
    start_time: datetime,
    end_time: datetime | None = None,
) -> TripMetrics:
    """Distance (km), duration (s) and average speed (km/h) for a route.

    Duration and speed stay 0 until the trip has an end time.
    """
    distance_km = route_distance_km(route)
    if end_time is None:
        return TripMetrics(distance_km=distance_km, duration_sec=0, avg_speed_kmh=0.0)

    duration_sec = max(0, math.floor((end_time - start_time).total_seconds()))
    avg_speed_kmh = (
        distance_km / duration_sec * AVERAGE_SPEED_FACTOR if duration_sec > 0 else 0.0
    )
    return TripMetrics(
        distance_km=distance_km,
        duration_sec=duration_sec,
        avg_speed_kmh=avg_speed_kmh,
    )


def round_distance(distance: float | None) -> int:
    """Round a distance to a whole odometer increment, ties going down.

    The fractional part must strictly exceed 0.5 to round up:
    2.5 -> 2, 2.51 -> 3.
    """
    if distance is None or not math.isfinite(distance):
        return 0
    base = math.floor(distance)
    return base + 1 if distance - base > 0.5 else base

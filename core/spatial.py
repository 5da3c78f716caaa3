"""
Spatial utilities.

Coordinate validation and great-circle distance for GPS fixes.
"""

from __future__ import annotations

import math
from typing import Any

from core.constants import EARTH_RADIUS_KM


class GeometryService:
    """Authoritative geometry operations for the application."""

    EARTH_RADIUS_KM = EARTH_RADIUS_KM

    @staticmethod
    def is_finite_number(value: Any) -> bool:
        """True for real ints/floats that are not NaN or infinite (bools excluded)."""
        if isinstance(value, bool) or not isinstance(value, int | float):
            return False
        try:
            return math.isfinite(value)
        except OverflowError:
            # ints beyond float range
            return False

    @staticmethod
    def validate_lat_lon(lat: Any, lon: Any) -> bool:
        """Validate a latitude/longitude pair."""
        if not (
            GeometryService.is_finite_number(lat)
            and GeometryService.is_finite_number(lon)
        ):
            return False
        return -90 <= lat <= 90 and -180 <= lon <= 180

    @staticmethod
    def haversine_distance(
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float,
    ) -> float:
        """Great-circle distance in kilometers using the Haversine formula."""
        phi1 = math.radians(lat1)
        phi2 = math.radians(lat2)
        dphi = math.radians(lat2 - lat1)
        dlmb = math.radians(lon2 - lon1)
        a = (
            math.sin(dphi / 2) ** 2
            + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
        )
        # Clamp float drift so sqrt(1 - a) stays real for antipodal points
        a = min(1.0, max(0.0, a))
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return GeometryService.EARTH_RADIUS_KM * c

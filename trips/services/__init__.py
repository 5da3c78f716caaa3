"""Trip services module."""

from trips.services.trip_lifecycle_service import TripLifecycleService
from trips.services.trip_metrics import TripMetrics, compute_metrics, round_distance
from trips.services.trip_query_service import TripQueryService

__all__ = [
    "TripLifecycleService",
    "TripMetrics",
    "TripQueryService",
    "compute_metrics",
    "round_distance",
]

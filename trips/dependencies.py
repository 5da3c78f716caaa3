"""FastAPI dependencies shared by the trip routes."""

from trips.services.trip_lifecycle_service import TripLifecycleService

_lifecycle = TripLifecycleService()


def get_trip_lifecycle() -> TripLifecycleService:
    return _lifecycle

"""
Trip tracking and management package.

This package provides modular functionality for:
- Trip lifecycle (start, append GPS fixes, end, update, delete)
- Distance, duration and speed measurement
- Trip querying and pagination

The package is organized into:
- routes/: API endpoint handlers organized by domain
- services/: Business logic and measurement
- serializers.py: Data transformation utilities
"""

from fastapi import APIRouter

from trips.routes import crud, query, route_points

# Create main router that aggregates all trip-related routes
router = APIRouter()

# Static paths (/api/trips/active...) must be registered before /{trip_id}
router.include_router(query.router, tags=["trips-query"])
router.include_router(route_points.router, tags=["trips-route"])
router.include_router(crud.router, tags=["trips-crud"])

__all__ = ["router"]

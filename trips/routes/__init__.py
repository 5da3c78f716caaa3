"""Trip API routes."""

from trips.routes import crud, query, route_points

__all__ = ["crud", "query", "route_points"]

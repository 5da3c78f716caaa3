"""Database package for MongoDB operations using Beanie ODM.

Modules:
    manager: DatabaseManager singleton for connection handling
    models: Beanie Document models for all collections
"""

from db.manager import DatabaseManager, db_manager
from db.models import (
    ALL_DOCUMENT_MODELS,
    RoutePoint,
    Trip,
    TripStatus,
    UserOdometer,
)

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "DatabaseManager",
    "RoutePoint",
    "Trip",
    "TripStatus",
    "UserOdometer",
    "db_manager",
]

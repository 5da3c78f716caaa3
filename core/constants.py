"""Global constants for the core package.

This module contains shared constants used across the application core.
"""

from typing import Final

# HTTP Client Constants
HTTP_CONNECTION_LIMIT: Final[int] = 10
HTTP_TIMEOUT_CONNECT: Final[float] = 5.0
HTTP_TIMEOUT_SOCK_READ: Final[float] = 10.0
HTTP_TIMEOUT_TOTAL: Final[float] = 15.0

# Geodesy
EARTH_RADIUS_KM: Final[float] = 6371.0

# averageSpeed = distance / duration * AVERAGE_SPEED_FACTOR
AVERAGE_SPEED_FACTOR: Final[float] = 3.6

# Reverse geocoding cache key precision (~1.1 m)
GEOCODE_KEY_DECIMALS: Final[int] = 5

# Trip field limits
PURPOSE_MIN_LENGTH: Final[int] = 3
PURPOSE_MAX_LENGTH: Final[int] = 200
LOCATION_MAX_LENGTH: Final[int] = 500

# Trip listing
DEFAULT_PAGE_SIZE: Final[int] = 50
MAX_PAGE_SIZE: Final[int] = 500

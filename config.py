"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import constants from here rather than calling os.getenv directly
in multiple places.
"""

from __future__ import annotations

import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


# --- MongoDB ---
MONGODB_URI: Final[str] = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE: Final[str] = os.getenv("MONGODB_DATABASE", "trip_meter")


# --- Reverse geocoding (Nominatim) ---
DEFAULT_NOMINATIM_BASE_URL: Final[str] = "https://nominatim.openstreetmap.org"
DEFAULT_GEOCODE_USER_AGENT: Final[str] = "trip-meter/1.0"

GEOCODE_TIMEOUT_SECONDS: Final[float] = float(
    os.getenv("GEOCODE_TIMEOUT_SECONDS", "5.0"),
)
GEOCODE_CACHE_TTL_SECONDS: Final[float] = float(
    os.getenv("GEOCODE_CACHE_TTL_SECONDS", str(6 * 60 * 60)),
)
GEOCODE_CACHE_MAX_ENTRIES: Final[int] = int(
    os.getenv("GEOCODE_CACHE_MAX_ENTRIES", "10000"),
)
GEOCODE_ZOOM: Final[int] = int(os.getenv("GEOCODE_ZOOM", "14"))


def get_nominatim_base_url() -> str:
    return os.getenv("NOMINATIM_BASE_URL", DEFAULT_NOMINATIM_BASE_URL).rstrip("/")


def get_nominatim_reverse_url() -> str:
    return f"{get_nominatim_base_url()}/reverse"


def get_nominatim_user_agent() -> str:
    return os.getenv("GEOCODE_USER_AGENT") or DEFAULT_GEOCODE_USER_AGENT


# --- HTTP surface ---
def get_cors_origins() -> list[str]:
    """Allowed CORS origins; an empty setting means any origin."""
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


__all__ = [
    "GEOCODE_CACHE_MAX_ENTRIES",
    "GEOCODE_CACHE_TTL_SECONDS",
    "GEOCODE_TIMEOUT_SECONDS",
    "GEOCODE_ZOOM",
    "LOG_LEVEL",
    "MONGODB_DATABASE",
    "MONGODB_URI",
    "get_cors_origins",
    "get_nominatim_base_url",
    "get_nominatim_reverse_url",
    "get_nominatim_user_agent",
]

"""Best-effort place naming on top of Nominatim reverse geocoding.

``PlaceNamer.name_for`` never raises: every upstream failure (timeout,
non-200, malformed body, open circuit) yields ``None``. Results are memoized
per coordinate rounded to five decimals for a limited time.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from config import (
    GEOCODE_CACHE_MAX_ENTRIES,
    GEOCODE_CACHE_TTL_SECONDS,
    GEOCODE_TIMEOUT_SECONDS,
)
from core.constants import GEOCODE_KEY_DECIMALS
from core.http.nominatim import NominatimClient

logger = logging.getLogger(__name__)

# Most specific first; the first populated field wins.
ADDRESS_NAME_FIELDS: tuple[str, ...] = (
    "suburb",
    "neighbourhood",
    "quarter",
    "hamlet",
    "village",
    "town",
    "city",
    "municipality",
    "state_district",
    "state",
    "country",
)


def coord_key(lat: float, lon: float) -> str:
    """Cache key with coordinates rounded to ~1.1 m."""
    return f"{lat:.{GEOCODE_KEY_DECIMALS}f},{lon:.{GEOCODE_KEY_DECIMALS}f}"


def extract_place_name(response: Any) -> str | None:
    """Pick a human-friendly area name out of a Nominatim reverse response."""
    if not isinstance(response, dict):
        return None
    display_name = response.get("display_name")
    if not isinstance(display_name, str) or not display_name.strip():
        display_name = None
    address = response.get("address")
    if not isinstance(address, dict):
        return display_name
    for field in ADDRESS_NAME_FIELDS:
        value = address.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return display_name


class PlaceNameCache:
    """Thread-safe TTL cache with LRU eviction once ``max_entries`` is reached."""

    def __init__(
        self,
        *,
        ttl_seconds: float = GEOCODE_CACHE_TTL_SECONDS,
        max_entries: int = GEOCODE_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            name, stored_at = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return name

    def set(self, key: str, name: str) -> None:
        with self._lock:
            self._entries[key] = (name, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)


class PlaceNamer:
    """Resolve coordinates to a short place name, memoized and failure-proof."""

    def __init__(
        self,
        client: NominatimClient | None = None,
        cache: PlaceNameCache | None = None,
        timeout_seconds: float = GEOCODE_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client if client is not None else NominatimClient()
        self.cache = cache if cache is not None else PlaceNameCache()
        self.timeout_seconds = timeout_seconds

    async def name_for(self, lat: float | None, lon: float | None) -> str | None:
        if lat is None or lon is None:
            return None

        key = coord_key(lat, lon)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        # Concurrent misses for one key may each hit the upstream; the
        # results are interchangeable so the last write simply wins.
        try:
            async with asyncio.timeout(self.timeout_seconds):
                response = await self._client.reverse(lat, lon)
        except Exception as exc:
            logger.warning("Reverse geocode failed for %s: %s", key, exc)
            return None

        name = extract_place_name(response)
        if name:
            self.cache.set(key, name)
        return name


place_namer = PlaceNamer()


__all__ = [
    "ADDRESS_NAME_FIELDS",
    "PlaceNameCache",
    "PlaceNamer",
    "coord_key",
    "extract_place_name",
    "place_namer",
]

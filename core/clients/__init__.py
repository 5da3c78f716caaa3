"""Client wrappers for external services."""

from core.clients.nominatim import PlaceNameCache, PlaceNamer, place_namer

__all__ = [
    "PlaceNameCache",
    "PlaceNamer",
    "place_namer",
]

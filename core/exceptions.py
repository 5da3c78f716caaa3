"""
Centralized exception hierarchy for domain-specific errors.

Every lifecycle and ledger operation fails with one of these classes so the
HTTP layer (see ``core.api.api_route``) can map them to status codes.
"""


class TripMeterError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TripMeterError):
    """Malformed, missing or out-of-range input."""


class ResourceNotFoundError(TripMeterError):
    """The referenced trip does not exist or belongs to another user."""


class ConflictError(TripMeterError):
    """The request would break the single-active-trip or immutable-trip rule."""


class ExternalServiceError(TripMeterError):
    """A best-effort upstream (reverse geocoding) failed."""


class PersistenceError(TripMeterError):
    """The document store rejected or failed an operation."""


class AuthenticationError(TripMeterError):
    """No trusted user identity accompanied the request."""

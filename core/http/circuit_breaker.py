"""
Async circuit breaker for the reverse-geocoding upstream.

After a run of consecutive failures the breaker opens and calls are
rejected immediately until the recovery window has passed; the first call
after that is let through as a probe.
"""

from __future__ import annotations

import functools
import logging
import time

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half-open"


class CircuitOpen(Exception):
    """Raised when a call is rejected because the circuit is open."""

    def __init__(self, service: str, resets_in: float) -> None:
        super().__init__(
            f"Circuit breaker open for {service} (resets in {resets_in:.0f}s)"
        )
        self.service = service
        self.resets_in = resets_in


class CircuitBreaker:
    def __init__(
        self,
        service: str,
        *,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
    ) -> None:
        self.service = service
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.reset()

    def reset(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None
        self._state = CLOSED

    @property
    def state(self) -> str:
        if (
            self._state == OPEN
            and self._opened_at is not None
            and time.monotonic() - self._opened_at >= self.recovery_timeout
        ):
            self._state = HALF_OPEN
        return self._state

    def _open(self) -> None:
        self._state = OPEN
        self._opened_at = time.monotonic()

    def record_success(self) -> None:
        if self._state != CLOSED:
            logger.info("Circuit breaker CLOSED for %s", self.service)
        self.reset()

    def record_failure(self) -> None:
        self._failures += 1
        if self._state == HALF_OPEN:
            self._open()
            logger.warning(
                "Circuit breaker re-OPEN for %s (half-open probe failed)",
                self.service,
            )
        elif self._state == CLOSED and self._failures >= self.failure_threshold:
            self._open()
            logger.warning(
                "Circuit breaker OPEN for %s after %d failures",
                self.service,
                self._failures,
            )

    def check(self) -> None:
        """Raise :class:`CircuitOpen` while the circuit is open."""
        if self.state == OPEN:
            elapsed = time.monotonic() - (self._opened_at or 0)
            raise CircuitOpen(self.service, max(0.0, self.recovery_timeout - elapsed))


nominatim_breaker = CircuitBreaker(
    "Nominatim", failure_threshold=5, recovery_timeout=60
)


def with_circuit_breaker(breaker: CircuitBreaker):
    """Decorator that wraps an async function with circuit breaker protection."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            breaker.check()
            try:
                result = await fn(*args, **kwargs)
            except Exception:
                breaker.record_failure()
                raise
            breaker.record_success()
            return result

        return wrapper

    return decorator

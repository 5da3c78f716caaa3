"""Retry utilities for async HTTP operations, built on tenacity."""

from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_HTTP_ERRORS: tuple[type[BaseException], ...] = (
    ClientError,
    asyncio.TimeoutError,
)


def retry_async(
    max_retries: int = 3,
    retry_delay: float = 1.0,
    backoff_factor: float = 2.0,
    retry_exceptions: tuple[type[BaseException], ...] = TRANSIENT_HTTP_ERRORS,
):
    """Build a tenacity retry decorator for transient HTTP failures.

    Args:
        max_retries: Retry attempts in addition to the first attempt.
        retry_delay: Initial delay between retries in seconds.
        backoff_factor: Exponential backoff base.
        retry_exceptions: Exception types that trigger a retry.

    Example:
        @retry_async(max_retries=1, retry_delay=0.5)
        async def fetch_data():
            ...
    """
    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=retry_delay, exp_base=backoff_factor),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

import asyncio

import aiohttp
import pytest

from core.http.retry import retry_async


@pytest.mark.asyncio
async def test_retry_async_retries_until_success() -> None:
    attempts = 0

    @retry_async(max_retries=2, retry_delay=0)
    async def flaky():
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise asyncio.TimeoutError()
        return "ok"

    assert await flaky() == "ok"
    assert attempts == 3


@pytest.mark.asyncio
async def test_retry_async_retries_client_errors_then_reraises() -> None:
    attempts = 0

    @retry_async(max_retries=1, retry_delay=0)
    async def always_fail():
        nonlocal attempts
        attempts += 1
        raise aiohttp.ClientConnectionError("connection reset")

    with pytest.raises(aiohttp.ClientConnectionError):
        await always_fail()

    assert attempts == 2


@pytest.mark.asyncio
async def test_retry_async_does_not_retry_other_errors() -> None:
    attempts = 0

    @retry_async(max_retries=3, retry_delay=0)
    async def broken():
        nonlocal attempts
        attempts += 1
        raise ValueError("bad payload")

    with pytest.raises(ValueError, match="bad payload"):
        await broken()

    assert attempts == 1

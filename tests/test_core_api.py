import logging

import pytest
from fastapi import HTTPException, status

from core.api import api_route
from core.auth import get_current_user_id
from core.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    PersistenceError,
    ResourceNotFoundError,
    TripMeterError,
    ValidationError,
)

logger = logging.getLogger("tests.core_api")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "expected_status", "expected_detail"),
    [
        (ValidationError("bad input"), status.HTTP_400_BAD_REQUEST, "bad input"),
        (ResourceNotFoundError("missing"), status.HTTP_404_NOT_FOUND, "missing"),
        (ConflictError("already active"), status.HTTP_409_CONFLICT, "already active"),
        (AuthenticationError("no auth"), status.HTTP_401_UNAUTHORIZED, "no auth"),
        (
            ExternalServiceError("upstream down"),
            status.HTTP_502_BAD_GATEWAY,
            "External service error: upstream down",
        ),
        (
            PersistenceError("write failed"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "write failed",
        ),
        (
            TripMeterError("generic"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "generic",
        ),
    ],
)
async def test_api_route_maps_domain_exceptions(
    exc: Exception,
    expected_status: int,
    expected_detail: str,
) -> None:
    @api_route(logger)
    async def handler():
        raise exc

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == expected_status
    assert raised.value.detail == expected_detail


@pytest.mark.asyncio
async def test_api_route_allows_http_exception_passthrough() -> None:
    @api_route(logger)
    async def handler():
        raise HTTPException(status_code=418, detail="nope")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == 418
    assert raised.value.detail == "nope"


@pytest.mark.asyncio
async def test_api_route_wraps_unexpected_exception() -> None:
    @api_route(logger)
    async def handler():
        raise ValueError("boom")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert raised.value.detail == "boom"


@pytest.mark.asyncio
async def test_api_route_returns_handler_result() -> None:
    @api_route(logger)
    async def handler(value: int):
        return {"success": True, "data": value}

    assert await handler(3) == {"success": True, "data": 3}


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "   "])
async def test_missing_user_id_raises_authentication_error(header) -> None:
    with pytest.raises(AuthenticationError, match="Not authorized"):
        await get_current_user_id(header)


@pytest.mark.asyncio
async def test_user_id_is_trimmed() -> None:
    assert await get_current_user_id("  driver-7 ") == "driver-7"

"""
Shared HTTP request helper.

Keeps JSON request/response handling and error mapping consistent for
outbound service calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import ContentTypeError

from core.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


async def request_json(
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    expected_status: int | Iterable[int] = 200,
    none_on: Iterable[int] | None = None,
    service_name: str = "Service",
    timeout: Any | None = None,
) -> Any | None:
    """GET ``url`` and decode its JSON body.

    Returns None for statuses listed in ``none_on``. Any other unexpected
    status, or a body that is not JSON, raises ExternalServiceError.
    """
    if isinstance(expected_status, int):
        expected = {expected_status}
    else:
        expected = set(expected_status)
    none_on_set = set(none_on or [])

    request_kwargs: dict[str, Any] = {"params": params, "headers": headers}
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    async with session.get(url, **request_kwargs) as response:
        if response.status in none_on_set:
            logger.debug("%s returned %s for %s", service_name, response.status, url)
            return None
        if response.status not in expected:
            body = await response.text()
            msg = f"{service_name} error: {response.status}"
            raise ExternalServiceError(
                msg,
                {
                    "status": response.status,
                    "body": body,
                    "url": str(getattr(response, "url", url)),
                },
            )
        try:
            return await response.json()
        except (ContentTypeError, ValueError) as exc:
            msg = f"{service_name} error: malformed response body"
            raise ExternalServiceError(msg, {"url": url}) from exc

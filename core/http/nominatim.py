"""
Nominatim HTTP client.

Only reverse geocoding is needed: coordinates in, structured address out.
"""

from __future__ import annotations

import logging
from typing import Any

from config import GEOCODE_ZOOM, get_nominatim_reverse_url, get_nominatim_user_agent
from core.exceptions import ExternalServiceError
from core.http.circuit_breaker import nominatim_breaker, with_circuit_breaker
from core.http.request import request_json
from core.http.retry import retry_async
from core.http.session import get_session

logger = logging.getLogger(__name__)


class NominatimClient:
    def __init__(self) -> None:
        self._reverse_url = get_nominatim_reverse_url()
        self._user_agent = get_nominatim_user_agent()

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    @with_circuit_breaker(nominatim_breaker)
    @retry_async(max_retries=1, retry_delay=0.5)
    async def reverse(
        self,
        lat: float,
        lon: float,
        *,
        zoom: int = GEOCODE_ZOOM,
    ) -> dict[str, Any] | None:
        params = {
            "format": "jsonv2",
            "lat": lat,
            "lon": lon,
            "zoom": zoom,
            "addressdetails": 1,
        }
        session = await get_session()
        data = await request_json(
            self._reverse_url,
            session=session,
            params=params,
            headers=self._headers(),
            service_name="Nominatim reverse",
            none_on=(404,),
        )
        if data is None:
            return None
        if not isinstance(data, dict):
            msg = "Nominatim reverse error: unexpected response"
            raise ExternalServiceError(msg, {"url": self._reverse_url})
        return data

"""Shared async HTTP client for the OTP delivery gateways."""

import time
from typing import Any

import httpx

from shared.logging import get_logger

log = get_logger(__name__)

_USER_AGENT = "cc-core/1.0"


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance is shared by the SMS and email providers for the process
    lifetime and closed on shutdown. Each call logs its latency at debug level.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": _USER_AGENT}
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        started = time.perf_counter()
        response = await self._client.request(method, url, **kwargs)
        log.debug(
            "http_request",
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

"""HTTP transport used to reach the authentication service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from tiauth.errors import ConnectFailureError
from tiauth.logging import get_logger

_logger = get_logger()


@dataclass
class TransportResponse:
    """Status, headers and body of a completed request."""

    status_code: int
    headers: httpx.Headers
    text: str


class HttpTransport:
    """Send single requests with a fresh httpx client each time.

    No cookie jar survives between requests and nothing is retried. Any
    ``httpx.HTTPError`` surfaces as ConnectFailureError.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def post(
        self,
        url: str,
        data: dict[str, Any],
        headers: dict[str, str] | None = None,
        proxy: str | None = None,
    ) -> TransportResponse:
        return await self._send("POST", url, headers, proxy, data=data)

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        proxy: str | None = None,
    ) -> TransportResponse:
        return await self._send("GET", url, headers, proxy)

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        proxy: str | None,
        **kwargs: Any,
    ) -> TransportResponse:
        client_kwargs: dict[str, Any] = {"timeout": httpx.Timeout(self.timeout)}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        elif proxy:
            client_kwargs["proxy"] = proxy

        _logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                resp = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ConnectFailureError(
                f"Error communicating with the server: {exc}"
            ) from exc
        _logger.debug("%s %s -> %d", method, url, resp.status_code)
        return TransportResponse(resp.status_code, resp.headers, resp.text)

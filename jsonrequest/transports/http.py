"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

HTTP transport backed by httpx (default).
"""

from __future__ import annotations

import asyncio
import weakref
from typing import AsyncIterator, Optional

import httpx

from jsonrequest.config.settings import TransportSettings
from jsonrequest.exceptions import TransportError
from jsonrequest.logging_config import get_logger
from jsonrequest.transports.base import BaseTransport, OutboundRequest, TransportResponse

logger = get_logger(__name__)


class HttpxTransport(BaseTransport):
    """Default HTTP transport using ``httpx.AsyncClient``.

    With a caller-supplied ``client`` every request goes through that
    client, and the client is never closed by the transport. Without one,
    the transport builds a client from ``settings`` the first time it is
    used on an event loop and reuses it, with its connection pool, for
    every later request on that loop. An ``httpx.AsyncClient`` is bound to
    the loop it first ran on, so a single instance can still be shared
    across loops.

    Args:
        client: Optional caller-owned ``httpx.AsyncClient``.
        settings: Timeouts, redirect/TLS policy and default headers for
            the transport's own clients.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[TransportSettings] = None,
    ) -> None:
        self._client = client
        self._settings = settings or TransportSettings()
        self._closed = False
        self._loop_clients: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, httpx.AsyncClient
        ] = weakref.WeakKeyDictionary()

    @classmethod
    def from_settings(cls, settings: TransportSettings) -> HttpxTransport:
        return cls(settings=settings)

    @property
    def settings(self) -> TransportSettings:
        return self._settings

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        loop = asyncio.get_running_loop()
        client = self._loop_clients.get(loop)
        if client is None or client.is_closed:
            client = self._build_client()
            self._loop_clients[loop] = client
            logger.debug("httpx_client_created", user_agent=self._settings.user_agent)
        return client

    def _build_client(self) -> httpx.AsyncClient:
        headers = {"User-Agent": self._settings.user_agent}
        headers.update(self._settings.default_headers)
        return httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(
                self._settings.timeout_seconds,
                connect=self._settings.connect_timeout_seconds,
            ),
            follow_redirects=self._settings.follow_redirects,
            verify=self._settings.verify_tls,
        )

    def _request_timeout(self, request: OutboundRequest) -> Optional[httpx.Timeout]:
        if request.timeout is None:
            return None
        budget = max(request.timeout, 0.001)
        return httpx.Timeout(
            min(budget, self._settings.timeout_seconds),
            connect=min(budget, self._settings.connect_timeout_seconds),
        )

    async def send(self, request: OutboundRequest) -> TransportResponse:
        if self._closed:
            raise TransportError("transport is closed")

        client = self._ensure_client()

        try:
            timeout = self._request_timeout(request)
            http_request = client.build_request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                content=request.body,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
            response = await client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            logger.debug(f"httpx send failed: {type(exc).__name__}: {exc}")
            raise TransportError(
                f"failed to execute request {request.method} {request.url}: {exc}",
                cause=exc,
            ) from exc

        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers),
            stream=_wrap_stream(response, request),
            release=response.aclose,
        )

    async def aclose(self) -> None:
        """Release the transport's HTTP resources.

        A caller-supplied client is detached but left open for its owner,
        and the transport stops accepting requests. Otherwise the client
        built for the running loop is closed; the transport stays usable
        and builds a fresh client on its next request.
        """
        if self._client is not None:
            self._client = None
            self._closed = True
            return
        client = self._loop_clients.pop(asyncio.get_running_loop(), None)
        if client is not None:
            await client.aclose()

    @property
    def is_connected(self) -> bool:
        return not self._closed


async def _wrap_stream(response: httpx.Response, request: OutboundRequest) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as exc:
        raise TransportError(
            f"failed to read response body for {request.method} {request.url}: {exc}",
            cause=exc,
        ) from exc

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Mock transport for local testing.
"""

from __future__ import annotations

import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit, urlunsplit

from jsonrequest.transports.base import BaseTransport, OutboundRequest, TransportResponse

MockHandler = Callable[
    [OutboundRequest], Union[TransportResponse, Awaitable[TransportResponse]]
]


def _strip_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class MockTransport(BaseTransport):
    """In-memory transport for unit tests.

    Requests are answered by ``handler`` when one is given, otherwise by
    looking up ``(METHOD, url)`` in ``responses`` (the URL without its
    query string). Unmatched requests get a 404.

    Args:
        responses: Mapping from ``(method, url)`` tuples to responses.
        handler: Callable, sync or async, producing a response per request.

    Example::

        transport = MockTransport({
            ("GET", "https://api.test/users/1"): MockTransport.json_response(
                200, {"id": 1, "name": "ada"}
            ),
        })
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], TransportResponse]] = None,
        handler: Optional[MockHandler] = None,
    ) -> None:
        self._responses: Dict[Tuple[str, str], TransportResponse] = responses or {}
        self._handler = handler
        self._sent: list[OutboundRequest] = []
        self._issued: list[TransportResponse] = []

    @staticmethod
    def json_response(
        status_code: int,
        payload: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Response whose body is ``payload`` encoded as JSON."""
        merged = {"Content-Type": "application/json"}
        merged.update(headers or {})
        return TransportResponse.from_bytes(
            status_code, json.dumps(payload).encode("utf-8"), headers=merged
        )

    @staticmethod
    def raw_response(
        status_code: int,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Response with a literal body."""
        return TransportResponse.from_bytes(status_code, content, headers=headers)

    async def send(self, request: OutboundRequest) -> TransportResponse:
        self._sent.append(request)
        if self._handler is not None:
            response = self._handler(request)
            if inspect.isawaitable(response):
                response = await response
        else:
            key = (request.method.upper(), _strip_query(request.url))
            if key in self._responses:
                response = self._responses[key]
            else:
                response = self.json_response(404, {"error": "not mocked"})
        self._issued.append(response)
        return response

    async def aclose(self) -> None:
        self._responses.clear()
        self._sent.clear()
        self._issued.clear()

    @property
    def is_connected(self) -> bool:
        return True

    @property
    def sent_requests(self) -> list[OutboundRequest]:
        """All requests that have been sent through this transport."""
        return list(self._sent)

    @property
    def issued_responses(self) -> list[TransportResponse]:
        """All responses handed out, in order."""
        return list(self._issued)

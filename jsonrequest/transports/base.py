"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Transport base class and data structures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional


@dataclass
class OutboundRequest:
    """Fully built request handed to a transport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None


async def _empty_stream() -> AsyncIterator[bytes]:
    return
    yield  # pragma: no cover


class TransportResponse:
    """Inbound response with an unread body stream.

    The body is consumed with :meth:`aread` and the underlying resources
    are released with :meth:`aclose`. Both are safe to call more than once.
    Use ``async with`` to scope the release::

        async with await transport.send(request) as response:
            payload = await response.aread()

    Args:
        status_code: HTTP status code.
        reason: Reason phrase, may be empty.
        headers: Response headers.
        stream: Async iterator over body chunks.
        release: Coroutine function that frees the connection.
    """

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        headers: Optional[Dict[str, str]] = None,
        stream: Optional[AsyncIterator[bytes]] = None,
        release: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.headers: Dict[str, str] = dict(headers or {})
        self._stream = stream if stream is not None else _empty_stream()
        self._release = release
        self._content: Optional[bytes] = None
        self._closed = False

    @classmethod
    def from_bytes(
        cls,
        status_code: int,
        content: bytes = b"",
        reason: str = "",
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Build a response whose body is already in memory."""

        async def stream() -> AsyncIterator[bytes]:
            if content:
                yield content

        return cls(status_code=status_code, reason=reason, headers=headers, stream=stream())

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def aread(self) -> bytes:
        """Read the whole body."""
        if self._content is None:
            chunks = []
            async for chunk in self._stream:
                chunks.append(chunk)
            self._content = b"".join(chunks)
        return self._content

    async def aclose(self) -> None:
        """Release the body stream and the connection behind it."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._stream, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._release is not None:
            await self._release()

    async def __aenter__(self) -> TransportResponse:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<TransportResponse [{self.status_code}]>"


class BaseTransport(ABC):
    """Abstract base for all transports."""

    @abstractmethod
    async def send(self, request: OutboundRequest) -> TransportResponse:
        """Send a request and return the response with its body unread."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release transport resources."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the transport is in a usable state."""
        ...

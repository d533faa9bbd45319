"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Per-call request options.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from jsonrequest.transports.base import BaseTransport


class HTTPMethod(str, Enum):
    """HTTP verbs supported by the executor."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: Any) -> HTTPMethod:
        """Coerce a string or member into an ``HTTPMethod``.

        Raises:
            ValueError: If the value does not name a supported verb.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"unsupported HTTP method: {value!r}") from None


@dataclass
class RequestConfig:
    """Optional overrides attached to a single call.

    Args:
        transport: Transport to submit through. ``None`` selects the
            executor's transport.
        method: Verb for :meth:`RequestExecutor.request`. Verb-specific
            entry points reject a value that disagrees with their verb.
        headers: Headers applied on top of the defaults, by key.
        query: Value serialized into the query string. Must encode to a
            JSON object.
        body: Request body used when no explicit body argument is given.
    """

    transport: Optional[BaseTransport] = None
    method: Optional[HTTPMethod] = None
    headers: Dict[str, str] = field(default_factory=dict)
    query: Any = None
    body: Any = None

    def with_defaults(self, transport: BaseTransport) -> RequestConfig:
        """Return a copy with unset fields filled in."""
        return replace(
            self,
            transport=self.transport if self.transport is not None else transport,
            method=HTTPMethod.parse(self.method) if self.method is not None else None,
            headers=dict(self.headers or {}),
        )

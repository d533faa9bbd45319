"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Request lifecycle hook registry.

Callers can subscribe to the executor's request lifecycle to observe or
augment outbound requests without subclassing the executor.

Available hooks:
- on_before_request: Fired before every outbound request
- on_after_response: Fired after every successfully decoded response
- on_error: Fired on any request failure
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from jsonrequest.logging_config import get_logger
from jsonrequest.transports.base import OutboundRequest, TransportResponse

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Hook callback type aliases
# ---------------------------------------------------------------------------

BeforeRequestCallback = Callable[[OutboundRequest], OutboundRequest]
AfterResponseCallback = Callable[[OutboundRequest, TransportResponse, Any], None]
ErrorCallback = Callable[[Optional[OutboundRequest], Exception], None]


# ---------------------------------------------------------------------------
# HookRegistry
# ---------------------------------------------------------------------------

class HookRegistry:
    """
    Manages lifecycle hooks for a request executor.

    Multiple callbacks per hook are supported and executed in registration
    order. A callback that raises is logged and reported to the error
    callbacks; the request itself carries on.
    """

    def __init__(self) -> None:
        self._before_request_callbacks: List[BeforeRequestCallback] = []
        self._after_response_callbacks: List[AfterResponseCallback] = []
        self._error_callbacks: List[ErrorCallback] = []

    # -- Registration methods ------------------------------------------------

    def on_before_request(self, callback: BeforeRequestCallback) -> None:
        """Register a callback fired before every outbound request.

        The callback receives the request and **must** return an
        ``OutboundRequest`` (possibly modified).
        """
        self._before_request_callbacks.append(callback)
        logger.debug("Registered on_before_request hook")

    def on_after_response(self, callback: AfterResponseCallback) -> None:
        """Register a callback fired with ``(request, response, result)``."""
        self._after_response_callbacks.append(callback)
        logger.debug("Registered on_after_response hook")

    def on_error(self, callback: ErrorCallback) -> None:
        """Register a callback fired with ``(request, error)`` on failure."""
        self._error_callbacks.append(callback)
        logger.debug("Registered on_error hook")

    # -- Firing methods (called by the executor) -----------------------------

    def fire_before_request(self, request: OutboundRequest) -> OutboundRequest:
        """Fire all on_before_request callbacks in order.

        Each callback receives the (possibly replaced) request from the
        previous callback, forming a pipeline.
        """
        current = request
        for cb in self._before_request_callbacks:
            try:
                result = cb(current)
            except Exception as exc:
                logger.error(f"on_before_request hook error: {exc}", exc_info=True)
                self.fire_error(current, exc)
                continue
            if isinstance(result, OutboundRequest):
                current = result
            else:
                logger.warning(
                    "on_before_request hook returned "
                    f"{type(result).__name__}, keeping previous request"
                )
        return current

    def fire_after_response(
        self, request: OutboundRequest, response: TransportResponse, result: Any
    ) -> None:
        """Fire all on_after_response callbacks."""
        for cb in self._after_response_callbacks:
            try:
                cb(request, response, result)
            except Exception as exc:
                logger.error(f"on_after_response hook error: {exc}", exc_info=True)
                self.fire_error(request, exc)

    def fire_error(self, request: Optional[OutboundRequest], error: Exception) -> None:
        """Fire all on_error callbacks.

        ``request`` is ``None`` when the failure happened before the
        outbound request could be built.
        """
        for cb in self._error_callbacks:
            try:
                cb(request, error)
            except Exception:
                # Avoid infinite recursion, just log
                logger.error("on_error hook itself raised an exception", exc_info=True)

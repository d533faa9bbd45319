"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Request executor.

Every call runs the same straight-line pipeline::

    build -> submit -> validate status -> decode -> return

and terminates either with the decoded value or with exactly one
:class:`~jsonrequest.exceptions.JsonRequestError`.

Quick start::

    import jsonrequest

    user = await jsonrequest.get("https://api.example.com/users/1", User)
    created = await jsonrequest.post(
        "https://api.example.com/users",
        {"name": "ada"},
        User,
        config=jsonrequest.RequestConfig(headers={"Authorization": "Bearer t"}),
    )
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union
from urllib.parse import urlsplit, urlunsplit

import httpx

from jsonrequest.codec import decode_body, encode_body, encode_query
from jsonrequest.config.settings import load_config
from jsonrequest.context import RequestContext
from jsonrequest.exceptions import (
    HTTPStatusError,
    InvalidRequestError,
    JsonRequestError,
    TransportError,
)
from jsonrequest.hooks import HookRegistry
from jsonrequest.logging_config import (
    get_logger,
    log_http_exchange,
    log_transport_failure,
    setup_logging,
)
from jsonrequest.options import HTTPMethod, RequestConfig
from jsonrequest.transports import DEFAULT_TRANSPORT
from jsonrequest.transports.base import BaseTransport, OutboundRequest, TransportResponse
from jsonrequest.transports.http import HttpxTransport

logger = get_logger(__name__)

T = TypeVar("T")

_ALLOWED_SCHEMES = ("http", "https")


def _set_header(headers: Dict[str, str], key: str, value: str) -> None:
    # Header names are case-insensitive; the caller's spelling wins.
    for existing in [k for k in headers if k.lower() == key.lower()]:
        del headers[existing]
    headers[key] = value


def build_url(url: str, query: Any = None) -> str:
    """Validate ``url`` and apply the encoded ``query`` to it.

    A present query replaces any query string already on the URL.

    Raises:
        InvalidRequestError: If the URL is malformed or not absolute http(s).
        QuerySerializationError: If the query does not encode to an object.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidRequestError(f"failed to create request: {e}") from e

    if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.host:
        raise InvalidRequestError(
            f"failed to create request: {url!r} is not an absolute http(s) URL"
        )

    if query is None:
        return str(parsed)
    parts = urlsplit(str(parsed))
    return urlunsplit(parts._replace(query=encode_query(query)))


class RequestExecutor:
    """Issues JSON requests through a transport and decodes the responses.

    The executor keeps no per-call state; one instance can serve any
    number of concurrent calls.

    Args:
        transport: Transport used when a call's config does not name one.
            Defaults to the shared ``DEFAULT_TRANSPORT``.
        hooks: Lifecycle hook registry. A fresh one is created if omitted.
    """

    def __init__(
        self,
        transport: Optional[BaseTransport] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self._transport = transport if transport is not None else DEFAULT_TRANSPORT
        self._hooks = hooks if hooks is not None else HookRegistry()

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    # -- Verb entry points ---------------------------------------------------

    async def get(
        self,
        url: str,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: Optional[RequestConfig] = None,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a GET request."""
        return await self._dispatch(HTTPMethod.GET, url, None, config, response_type, context)

    async def post(
        self,
        url: str,
        body: Any = None,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: Optional[RequestConfig] = None,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a POST request with ``body`` encoded as JSON."""
        return await self._dispatch(HTTPMethod.POST, url, body, config, response_type, context)

    async def put(
        self,
        url: str,
        body: Any = None,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: Optional[RequestConfig] = None,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a PUT request with ``body`` encoded as JSON."""
        return await self._dispatch(HTTPMethod.PUT, url, body, config, response_type, context)

    async def delete(
        self,
        url: str,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: Optional[RequestConfig] = None,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a DELETE request."""
        return await self._dispatch(HTTPMethod.DELETE, url, None, config, response_type, context)

    async def patch(
        self,
        url: str,
        body: Any = None,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: Optional[RequestConfig] = None,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a PATCH request with ``body`` encoded as JSON."""
        return await self._dispatch(HTTPMethod.PATCH, url, body, config, response_type, context)

    async def request(
        self,
        url: str,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        *,
        config: RequestConfig,
        context: Optional[RequestContext] = None,
    ) -> T:
        """Send a request whose verb is taken from ``config.method``.

        Raises:
            InvalidRequestError: If ``config.method`` is not set.
        """
        if config is None or config.method is None:
            raise InvalidRequestError("request() requires config.method to be set")
        return await self.execute(
            config.method, url, config=config, response_type=response_type, context=context
        )

    async def _dispatch(
        self,
        verb: HTTPMethod,
        url: str,
        body: Any,
        config: Optional[RequestConfig],
        response_type: Any,
        context: Optional[RequestContext],
    ) -> Any:
        if config is not None and config.method is not None:
            try:
                configured = HTTPMethod.parse(config.method)
            except ValueError as e:
                raise InvalidRequestError(str(e)) from e
            if configured is not verb:
                raise InvalidRequestError(
                    f"config.method is {configured.value} but {verb.value} was called"
                )
        return await self.execute(
            verb, url, body, config=config, response_type=response_type, context=context
        )

    # -- Pipeline ------------------------------------------------------------

    async def execute(
        self,
        method: Union[HTTPMethod, str],
        url: str,
        body: Any = None,
        config: Optional[RequestConfig] = None,
        response_type: Type[T] = Any,  # type: ignore[assignment]
        context: Optional[RequestContext] = None,
    ) -> T:
        """
        Build, submit, validate and decode a single request.

        Args:
            method: HTTP verb.
            url: Absolute http(s) URL.
            body: Request body; wins over ``config.body`` when both are set.
            config: Optional per-call overrides.
            response_type: Type the JSON response is decoded into.
            context: Cancellation and deadline carrier.

        Returns:
            The decoded response value.

        Raises:
            InvalidRequestError: Malformed URL or unsupported method.
            SerializationError: Body not JSON-encodable.
            QuerySerializationError: Query not a JSON object.
            TransportError: Network, transport or context failure.
            HTTPStatusError: Response status outside 2xx.
            DecodingError: Response body not decodable into ``response_type``.
        """
        context = context if context is not None else RequestContext.background()
        request: Optional[OutboundRequest] = None
        try:
            try:
                verb = HTTPMethod.parse(method)
                resolved = (config or RequestConfig()).with_defaults(self._transport)
            except ValueError as e:
                raise InvalidRequestError(str(e)) from e

            request = self._build_request(verb, url, body, resolved, context)
            request = self._hooks.fire_before_request(request)
            return await self._submit(resolved.transport, request, response_type, context)
        except JsonRequestError as exc:
            self._hooks.fire_error(request, exc)
            raise

    def _build_request(
        self,
        verb: HTTPMethod,
        url: str,
        body: Any,
        config: RequestConfig,
        context: RequestContext,
    ) -> OutboundRequest:
        payload = encode_body(body if body is not None else config.body)
        target = build_url(url, config.query)

        headers: Dict[str, str] = {"Accept": "application/json"}
        if payload is not None:
            headers["Content-Type"] = "application/json"
        for key, value in config.headers.items():
            _set_header(headers, key, value)

        return OutboundRequest(
            method=verb.value,
            url=target,
            headers=headers,
            body=payload,
            timeout=context.remaining(),
        )

    async def _submit(
        self,
        transport: BaseTransport,
        request: OutboundRequest,
        response_type: Any,
        context: RequestContext,
    ) -> Any:
        logger.debug("http_request", method=request.method, url=request.url)
        start = time.monotonic()

        response = await self._send(transport, request, context, start)
        duration_ms = round((time.monotonic() - start) * 1000, 2)

        async with response:
            log_http_exchange(
                logger, request.method, request.url, response.status_code, duration_ms
            )
            if not response.is_success:
                raise HTTPStatusError(request.url, response.status_code, response.reason)

            content = await self._read(response, request, context)
            result = decode_body(content, response_type)
            self._hooks.fire_after_response(request, response, result)
        return result

    async def _send(
        self,
        transport: BaseTransport,
        request: OutboundRequest,
        context: RequestContext,
        start: float,
    ) -> TransportResponse:
        try:
            return await context.run(transport.send(request))
        except TransportError as exc:
            self._log_failure(request, exc, start)
            raise
        except Exception as exc:
            self._log_failure(request, exc, start)
            raise TransportError(
                f"failed to execute request {request.method} {request.url}: {exc}",
                cause=exc,
            ) from exc

    async def _read(
        self,
        response: TransportResponse,
        request: OutboundRequest,
        context: RequestContext,
    ) -> bytes:
        try:
            return await context.run(response.aread())
        except TransportError:
            raise
        except Exception as exc:
            raise TransportError(
                f"failed to read response body for {request.method} {request.url}: {exc}",
                cause=exc,
            ) from exc

    @staticmethod
    def _log_failure(request: OutboundRequest, exc: BaseException, start: float) -> None:
        log_transport_failure(
            logger,
            request.method,
            request.url,
            reason=f"{type(exc).__name__}: {exc}",
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )


def configure_from_file(config_path: Union[str, Path]) -> RequestExecutor:
    """
    Load a YAML configuration file, apply its logging section and return an
    executor bound to a transport built from its transport section.

    Raises:
        InvalidConfigurationError: If the file is malformed or invalid.
    """
    config = load_config(str(config_path))
    setup_logging(
        level=config.logging.level,
        log_file=Path(config.logging.file) if config.logging.file else None,
        json_format=config.logging.json_format,
    )
    return RequestExecutor(transport=HttpxTransport.from_settings(config.transport))


# ---------------------------------------------------------------------------
# Module-level entry points bound to the shared default transport
# ---------------------------------------------------------------------------

default_executor = RequestExecutor(DEFAULT_TRANSPORT)


async def get(
    url: str,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: Optional[RequestConfig] = None,
    context: Optional[RequestContext] = None,
) -> T:
    """GET ``url`` and decode the JSON response into ``response_type``."""
    return await default_executor.get(url, response_type, config=config, context=context)


async def post(
    url: str,
    body: Any = None,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: Optional[RequestConfig] = None,
    context: Optional[RequestContext] = None,
) -> T:
    """POST ``body`` as JSON to ``url`` and decode the response."""
    return await default_executor.post(url, body, response_type, config=config, context=context)


async def put(
    url: str,
    body: Any = None,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: Optional[RequestConfig] = None,
    context: Optional[RequestContext] = None,
) -> T:
    """PUT ``body`` as JSON to ``url`` and decode the response."""
    return await default_executor.put(url, body, response_type, config=config, context=context)


async def delete(
    url: str,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: Optional[RequestConfig] = None,
    context: Optional[RequestContext] = None,
) -> T:
    """DELETE ``url`` and decode the JSON response."""
    return await default_executor.delete(url, response_type, config=config, context=context)


async def patch(
    url: str,
    body: Any = None,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: Optional[RequestConfig] = None,
    context: Optional[RequestContext] = None,
) -> T:
    """PATCH ``url`` with ``body`` as JSON and decode the response."""
    return await default_executor.patch(url, body, response_type, config=config, context=context)


async def request(
    url: str,
    response_type: Type[T] = Any,  # type: ignore[assignment]
    *,
    config: RequestConfig,
    context: Optional[RequestContext] = None,
) -> T:
    """Send a request whose verb comes from ``config.method``."""
    return await default_executor.request(url, response_type, config=config, context=context)

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

jsonrequest - JSON request helper over pluggable HTTP transports.

Quick start::

    import jsonrequest

    user = await jsonrequest.get("https://api.example.com/users/1", User)

With a deadline and a custom transport::

    executor = jsonrequest.RequestExecutor(transport=my_transport)
    async with jsonrequest.RequestContext(timeout=5) as ctx:
        await executor.delete("https://api.example.com/users/1", context=ctx)
"""

from jsonrequest._version import __version__
from jsonrequest.context import RequestContext
from jsonrequest.exceptions import (
    ConfigurationError,
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
    DecodingError,
    HTTPStatusError,
    InvalidConfigurationError,
    InvalidRequestError,
    JsonRequestError,
    QuerySerializationError,
    SerializationError,
    TransportError,
)
from jsonrequest.executor import (
    RequestExecutor,
    configure_from_file,
    default_executor,
    delete,
    get,
    patch,
    post,
    put,
    request,
)
from jsonrequest.hooks import HookRegistry
from jsonrequest.options import HTTPMethod, RequestConfig
from jsonrequest.transports import (
    DEFAULT_TRANSPORT,
    BaseTransport,
    HttpxTransport,
    MockTransport,
    OutboundRequest,
    TransportResponse,
)

__all__ = [
    "__version__",
    # entry points
    "get",
    "post",
    "put",
    "delete",
    "patch",
    "request",
    "RequestExecutor",
    "default_executor",
    "configure_from_file",
    # options
    "HTTPMethod",
    "RequestConfig",
    "RequestContext",
    "HookRegistry",
    # transports
    "BaseTransport",
    "HttpxTransport",
    "MockTransport",
    "OutboundRequest",
    "TransportResponse",
    "DEFAULT_TRANSPORT",
    # errors
    "JsonRequestError",
    "InvalidRequestError",
    "SerializationError",
    "QuerySerializationError",
    "TransportError",
    "HTTPStatusError",
    "DecodingError",
    "ContextError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "ConfigurationError",
    "InvalidConfigurationError",
]

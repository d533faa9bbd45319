"""
Exception hierarchy for jsonrequest.

All custom exceptions inherit from JsonRequestError base class.
"""

from typing import Optional


class JsonRequestError(Exception):
    """Base exception for all jsonrequest errors."""
    pass


# Request construction errors
class InvalidRequestError(JsonRequestError):
    """Raised when the URL or request cannot be constructed."""
    pass


class SerializationError(JsonRequestError):
    """Raised when a request body cannot be encoded as JSON."""
    pass


class QuerySerializationError(SerializationError):
    """Raised when a query value does not encode to a flat JSON object."""
    pass


# Exchange errors
class TransportError(JsonRequestError):
    """
    Raised when the transport fails to complete the exchange.

    Covers connection failures, timeouts and context cancellation. The
    underlying exception is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class HTTPStatusError(JsonRequestError):
    """Raised when the response status is outside the 2xx range."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        status = f"{status_code} {reason}".strip()
        super().__init__(f"request {url} failed with status: {status}")
        self.url = url
        self.status_code = status_code
        self.reason = reason


class DecodingError(JsonRequestError):
    """Raised when a response body cannot be decoded into the expected type."""
    pass


# Context errors
class ContextError(JsonRequestError):
    """Base exception for request context termination."""
    pass


class ContextCancelledError(ContextError):
    """Raised when a request context is cancelled."""
    pass


class DeadlineExceededError(ContextError):
    """Raised when a request context deadline passes."""
    pass


# Configuration errors
class ConfigurationError(JsonRequestError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass

"""
Unit tests for exception hierarchy.
"""

import pytest

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


class TestExceptionHierarchy:
    """Test that exception hierarchy is correctly defined."""

    def test_base_exception(self):
        """Test that JsonRequestError is the base exception."""
        error = JsonRequestError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"

    def test_request_errors_inherit_from_base(self):
        assert issubclass(InvalidRequestError, JsonRequestError)
        assert issubclass(SerializationError, JsonRequestError)
        assert issubclass(QuerySerializationError, SerializationError)

    def test_exchange_errors_inherit_from_base(self):
        assert issubclass(TransportError, JsonRequestError)
        assert issubclass(HTTPStatusError, JsonRequestError)
        assert issubclass(DecodingError, JsonRequestError)

    def test_context_errors_inherit_from_base(self):
        assert issubclass(ContextError, JsonRequestError)
        assert issubclass(ContextCancelledError, ContextError)
        assert issubclass(DeadlineExceededError, ContextError)

    def test_configuration_errors_inherit_from_base(self):
        assert issubclass(ConfigurationError, JsonRequestError)
        assert issubclass(InvalidConfigurationError, ConfigurationError)


class TestExceptionAttributes:
    def test_http_status_error_carries_url_and_status(self):
        error = HTTPStatusError("https://api.test/x", 404, "Not Found")
        assert error.url == "https://api.test/x"
        assert error.status_code == 404
        assert error.reason == "Not Found"
        assert str(error) == "request https://api.test/x failed with status: 404 Not Found"

    def test_http_status_error_without_reason(self):
        error = HTTPStatusError("https://api.test/x", 500)
        assert str(error).endswith("status: 500")

    def test_transport_error_keeps_cause(self):
        cause = OSError("connection refused")
        error = TransportError("failed to execute request", cause=cause)
        assert error.cause is cause

    def test_transport_error_cause_defaults_to_none(self):
        assert TransportError("boom").cause is None

    def test_exception_can_be_raised_and_caught(self):
        with pytest.raises(SerializationError) as exc_info:
            raise QuerySerializationError("query must be an object")

        assert "query must be an object" in str(exc_info.value)
        assert isinstance(exc_info.value, JsonRequestError)

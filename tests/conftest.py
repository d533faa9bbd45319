"""
Pytest configuration and shared fixtures for jsonrequest tests.
"""

import logging
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import structlog

from jsonrequest.executor import RequestExecutor
from jsonrequest.transports.base import OutboundRequest, TransportResponse
from jsonrequest.transports.mock import MockTransport


def echo_handler(request: OutboundRequest) -> TransportResponse:
    """Mock handler that returns the request body as the response body."""
    return MockTransport.raw_response(200, request.body or b"")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def echo_transport() -> MockTransport:
    """Transport that echoes request bodies back with status 200."""
    return MockTransport(handler=echo_handler)


@pytest.fixture
def echo_executor(echo_transport: MockTransport) -> RequestExecutor:
    """Executor bound to the echo transport."""
    return RequestExecutor(transport=echo_transport)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """
    Snapshot the root logger and structlog configuration, and restore both
    after the test so ``setup_logging`` calls do not leak between tests.
    """
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    saved_structlog = structlog.get_config()

    yield

    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    structlog.configure(**saved_structlog)

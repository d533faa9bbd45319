"""
Unit tests for structured logging configuration.
"""

import json
import logging
from pathlib import Path

import pytest

from jsonrequest.logging_config import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_http_exchange,
    log_transport_failure,
    set_correlation_id,
    setup_logging,
)

pytestmark = pytest.mark.usefixtures("restore_logging")


def _first_entry(log_file: Path) -> dict:
    lines = [line for line in log_file.read_text().strip().split("\n") if line]
    return json.loads(lines[0])


class TestLoggingConfiguration:
    """Test structured logging configuration functionality."""

    def test_setup_logging_default(self):
        setup_logging()

        logger = get_logger("test")
        assert hasattr(logger, 'info') and hasattr(logger, 'warning') and hasattr(logger, 'error')

    def test_setup_logging_with_level(self):
        setup_logging(level="DEBUG")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG

    def test_setup_logging_json_format(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        logger = get_logger("test")
        logger.info("test_message", key="value")

        log_entry = _first_entry(log_file)
        assert log_entry["event"] == "test_message"
        assert log_entry["key"] == "value"
        assert "timestamp" in log_entry
        assert log_entry["level"] == "info"

    def test_setup_logging_human_format(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=False)

        logger = get_logger("test")
        logger.info("test_message", key="value")

        log_content = log_file.read_text()
        assert "test_message" in log_content
        assert "key" in log_content

    def test_setup_logging_creates_parent_directory(self, temp_dir: Path):
        log_file = temp_dir / "nested" / "dir" / "test.log"
        setup_logging(log_file=log_file)

        get_logger("test").info("hello")
        assert log_file.exists()


class TestCorrelationId:
    def test_correlation_id_management(self):
        assert get_correlation_id() is None

        correlation_id = set_correlation_id("test-correlation-id")
        assert correlation_id == "test-correlation-id"
        assert get_correlation_id() == "test-correlation-id"

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_correlation_id_auto_generation(self):
        correlation_id = set_correlation_id()
        assert correlation_id
        assert get_correlation_id() == correlation_id

        clear_correlation_id()

    def test_correlation_id_in_logs(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        set_correlation_id("test-correlation-123")
        get_logger("test").info("test_message")

        assert _first_entry(log_file)["correlation_id"] == "test-correlation-123"

        clear_correlation_id()


class TestHttpLogHelpers:
    def test_log_http_exchange_success_is_debug(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)

        log_http_exchange(
            get_logger("test"), "GET", "https://api.test/users", 200, 12.5
        )

        log_entry = _first_entry(log_file)
        assert log_entry["event_type"] == "http_response"
        assert log_entry["method"] == "GET"
        assert log_entry["url"] == "https://api.test/users"
        assert log_entry["status_code"] == 200
        assert log_entry["duration_ms"] == 12.5
        assert log_entry["level"] == "debug"

    def test_log_http_exchange_error_status_is_warning(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        log_http_exchange(
            get_logger("test"), "POST", "https://api.test/users", 503, 3.0
        )

        log_entry = _first_entry(log_file)
        assert log_entry["status_code"] == 503
        assert log_entry["level"] == "warning"

    def test_log_transport_failure(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        log_transport_failure(
            get_logger("test"),
            "DELETE",
            "https://api.test/users/1",
            reason="ConnectError: refused",
            duration_ms=1.0,
        )

        log_entry = _first_entry(log_file)
        assert log_entry["event_type"] == "transport_failure"
        assert log_entry["reason"] == "ConnectError: refused"
        assert log_entry["duration_ms"] == 1.0
        assert log_entry["level"] == "warning"

    def test_log_transport_failure_without_duration(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        log_transport_failure(get_logger("test"), "GET", "https://api.test", reason="x")

        assert "duration_ms" not in _first_entry(log_file)

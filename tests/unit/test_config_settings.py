"""
Unit tests for configuration management.

Tests configuration loading, environment expansion and validation.
"""

import pytest

from jsonrequest.config.settings import (
    JsonRequestConfig,
    LoggingSettings,
    TransportSettings,
    _expand_env_vars,
    _validate_config,
    get_default_config,
    load_config,
)
from jsonrequest.exceptions import InvalidConfigurationError


class TestConfigurationDataclasses:
    """Test configuration dataclass structures."""

    def test_transport_settings_defaults(self):
        settings = TransportSettings()
        assert settings.timeout_seconds == 30.0
        assert settings.connect_timeout_seconds == 10.0
        assert settings.follow_redirects is True
        assert settings.verify_tls is True
        assert settings.user_agent.startswith("jsonrequest/")
        assert settings.default_headers == {}

    def test_logging_settings_defaults(self):
        settings = LoggingSettings()
        assert settings.level == "INFO"
        assert settings.file == ""
        assert settings.json_format is True

    def test_default_config(self):
        config = get_default_config()
        assert isinstance(config, JsonRequestConfig)
        assert config.transport == TransportSettings()


class TestLoadConfig:
    def test_no_path_returns_defaults(self):
        assert load_config() == get_default_config()

    def test_missing_file_returns_defaults(self, temp_dir):
        assert load_config(str(temp_dir / "missing.yaml")) == get_default_config()

    def test_empty_file_returns_defaults(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == get_default_config()

    def test_load_full_config(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text(
            """
transport:
  timeout_seconds: 5
  connect_timeout_seconds: 2.5
  follow_redirects: false
  verify_tls: false
  user_agent: svc/1.0
  default_headers:
    X-Team: payments
logging:
  level: debug
  file: /tmp/jsonrequest.log
  json_format: false
"""
        )

        config = load_config(str(path))

        assert config.transport.timeout_seconds == 5.0
        assert config.transport.connect_timeout_seconds == 2.5
        assert config.transport.follow_redirects is False
        assert config.transport.verify_tls is False
        assert config.transport.user_agent == "svc/1.0"
        assert config.transport.default_headers == {"X-Team": "payments"}
        assert config.logging.level == "debug"
        assert config.logging.file == "/tmp/jsonrequest.log"
        assert config.logging.json_format is False

    def test_partial_config_merges_defaults(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("transport:\n  timeout_seconds: 12\n")

        config = load_config(str(path))

        assert config.transport.timeout_seconds == 12.0
        assert config.transport.connect_timeout_seconds == 10.0
        assert config.logging == LoggingSettings()

    def test_env_var_expansion(self, temp_dir, monkeypatch):
        monkeypatch.setenv("JR_TEST_TOKEN", "secret")
        monkeypatch.delenv("JR_TEST_TIMEOUT", raising=False)
        path = temp_dir / "config.yaml"
        path.write_text(
            """
transport:
  timeout_seconds: ${JR_TEST_TIMEOUT:7}
  follow_redirects: ${JR_TEST_REDIRECTS:false}
  default_headers:
    Authorization: Bearer ${JR_TEST_TOKEN}
"""
        )

        config = load_config(str(path))

        assert config.transport.timeout_seconds == 7.0
        assert config.transport.follow_redirects is False
        assert config.transport.default_headers == {"Authorization": "Bearer secret"}

    def test_malformed_yaml_raises(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("transport: [unclosed\n")

        with pytest.raises(InvalidConfigurationError, match="Failed to parse YAML"):
            load_config(str(path))

    def test_non_mapping_document_raises(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(InvalidConfigurationError, match="must contain a mapping"):
            load_config(str(path))

    def test_non_mapping_section_raises(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("transport: 5\n")

        with pytest.raises(InvalidConfigurationError, match="'transport' section"):
            load_config(str(path))

    def test_non_numeric_timeout_raises(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("transport:\n  timeout_seconds: soon\n")

        with pytest.raises(InvalidConfigurationError, match="Invalid configuration"):
            load_config(str(path))

    def test_invalid_boolean_raises(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("transport:\n  verify_tls: maybe\n")

        with pytest.raises(InvalidConfigurationError):
            load_config(str(path))


class TestValidateConfig:
    def test_default_config_is_valid(self):
        _validate_config(get_default_config())

    def test_non_positive_timeout(self):
        config = JsonRequestConfig(transport=TransportSettings(timeout_seconds=0))
        with pytest.raises(InvalidConfigurationError, match="timeout_seconds"):
            _validate_config(config)

    def test_non_positive_connect_timeout(self):
        config = JsonRequestConfig(transport=TransportSettings(connect_timeout_seconds=-1))
        with pytest.raises(InvalidConfigurationError, match="connect_timeout_seconds"):
            _validate_config(config)

    def test_empty_user_agent(self):
        config = JsonRequestConfig(transport=TransportSettings(user_agent=""))
        with pytest.raises(InvalidConfigurationError, match="user_agent"):
            _validate_config(config)

    def test_invalid_log_level(self):
        config = JsonRequestConfig(logging=LoggingSettings(level="LOUD"))
        with pytest.raises(InvalidConfigurationError, match="logging level"):
            _validate_config(config)


class TestExpandEnvVars:
    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("JR_HOST", "api.test")
        value = {"a": ["${JR_HOST}", 1], "b": {"c": "x-${JR_MISSING:dflt}"}}

        assert _expand_env_vars(value) == {"a": ["api.test", 1], "b": {"c": "x-dflt"}}

    def test_missing_without_default_is_empty(self, monkeypatch):
        monkeypatch.delenv("JR_MISSING", raising=False)
        assert _expand_env_vars("${JR_MISSING}") == ""

"""
Configuration management for jsonrequest.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.

Configuration is only read from an explicitly given path; nothing is
loaded implicitly at import time.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from jsonrequest._version import __version__
from jsonrequest.exceptions import InvalidConfigurationError
from jsonrequest.logging_config import get_logger

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Examples:
        "${API_TOKEN}" -> value of API_TOKEN env var
        "${HTTP_TIMEOUT:30}" -> value of HTTP_TIMEOUT or "30" if not set
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class TransportSettings:
    """Settings for the default httpx transport."""

    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0
    follow_redirects: bool = True
    verify_tls: bool = True
    user_agent: str = f"jsonrequest/{__version__}"
    default_headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass
class JsonRequestConfig:
    """Main jsonrequest configuration."""

    transport: TransportSettings = field(default_factory=TransportSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def get_default_config() -> JsonRequestConfig:
    """Get default configuration."""
    return JsonRequestConfig()


def load_config(config_path: Optional[str] = None) -> JsonRequestConfig:
    """
    Load configuration from YAML file with validation.

    If no path is given, or the file is missing or empty, returns the
    default configuration. If the file is malformed or invalid, raises
    InvalidConfigurationError.

    Args:
        config_path: Path to configuration file.

    Returns:
        JsonRequestConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        return get_default_config()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping, "
            f"got {type(config_data).__name__}"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _as_bool(value: Any) -> bool:
    # Env var expansion turns booleans into strings
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ValueError(f"expected a boolean, got '{value}'")
    return bool(value)


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> JsonRequestConfig:
    """
    Build JsonRequestConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.
    """
    defaults = get_default_config()

    transport_data = _section(config_data, 'transport')
    default_headers = transport_data.get('default_headers') or {}
    if not isinstance(default_headers, dict):
        raise InvalidConfigurationError("transport.default_headers must be a mapping")

    transport = TransportSettings(
        timeout_seconds=float(
            transport_data.get('timeout_seconds', defaults.transport.timeout_seconds)
        ),
        connect_timeout_seconds=float(
            transport_data.get(
                'connect_timeout_seconds', defaults.transport.connect_timeout_seconds
            )
        ),
        follow_redirects=_as_bool(
            transport_data.get('follow_redirects', defaults.transport.follow_redirects)
        ),
        verify_tls=_as_bool(
            transport_data.get('verify_tls', defaults.transport.verify_tls)
        ),
        user_agent=str(transport_data.get('user_agent', defaults.transport.user_agent)),
        default_headers={str(k): str(v) for k, v in default_headers.items()},
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingSettings(
        level=str(logging_data.get('level', defaults.logging.level)),
        file=str(logging_data.get('file', defaults.logging.file) or ""),
        json_format=_as_bool(logging_data.get('json_format', defaults.logging.json_format)),
    )

    return JsonRequestConfig(transport=transport, logging=logging)


def _validate_config(config: JsonRequestConfig) -> None:
    """
    Validate configuration values.

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.transport.timeout_seconds <= 0:
        raise InvalidConfigurationError(
            f"timeout_seconds must be positive, got {config.transport.timeout_seconds}"
        )
    if config.transport.connect_timeout_seconds <= 0:
        raise InvalidConfigurationError(
            f"connect_timeout_seconds must be positive, "
            f"got {config.transport.connect_timeout_seconds}"
        )
    if not config.transport.user_agent:
        raise InvalidConfigurationError("user_agent cannot be empty")

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

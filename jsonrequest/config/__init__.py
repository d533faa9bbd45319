"""
Configuration management for jsonrequest.

Handles loading and validation of configuration files.
"""

from jsonrequest.config.settings import (
    JsonRequestConfig,
    LoggingSettings,
    TransportSettings,
    get_default_config,
    load_config,
)

__all__ = [
    "JsonRequestConfig",
    "LoggingSettings",
    "TransportSettings",
    "get_default_config",
    "load_config",
]

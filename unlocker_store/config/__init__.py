"""
Configuration module for Unlocker Store.

Contains environment settings and the configuration resolver.
"""

from .config_loader import (
    ConfigurationError,
    describe_configuration,
    ensure_api_token,
    find_configuration_issues,
    resolve_configuration,
)
from .settings import (
    LoggingSettings,
    Settings,
    StorageSettings,
    UnlockerSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConfigurationError",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "UnlockerSettings",
    "describe_configuration",
    "ensure_api_token",
    "find_configuration_issues",
    "get_settings",
    "reload_settings",
    "resolve_configuration",
]

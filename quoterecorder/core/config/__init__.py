"""Configuration management module."""

from quoterecorder.core.config.settings import (
    DEFAULT_CHART_URL,
    DEFAULT_MARKETS,
    ConfigManager,
    FetchConfig,
    LoggingConfig,
    RecorderConfig,
    StorageConfig,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "RecorderConfig",
    "FetchConfig",
    "StorageConfig",
    "LoggingConfig",
    "DEFAULT_CHART_URL",
    "DEFAULT_MARKETS",
    "load_config_from_env",
]

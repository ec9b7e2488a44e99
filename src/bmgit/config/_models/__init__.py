"""Configuration models."""

from bmgit.config._models._common import (
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LogLevel,
)
from bmgit.config._models._config import Config, get_user_config_path
from bmgit.config._models._sections import (
    APP_NAME,
    LoggingConfig,
    StorageConfig,
    TrackerConfig,
    UserConfig,
)

__all__ = [
    "APP_NAME",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StorageConfig",
    "TrackerConfig",
    "UserConfig",
    "get_user_config_path",
]

"""bmgit configuration.

Configuration is read from a TOML file (by default the platform user config
directory, ``~/.config/bmgit/config.toml`` on Linux), merged over built-in
defaults, then overridden by ``BMGIT_SECTION__KEY`` environment variables
and command line options.

Classes:
    Config: Immutable, typed configuration container.
    UserConfig, TrackerConfig, StorageConfig, LoggingConfig: Sections.

Example:
    >>> from bmgit.config import Config
    >>> config = Config.load()
    >>> config.tracker.commit_delay
    1.0
"""

from bmgit.config._defaults import DEFAULT_CONFIG, ENV_PREFIX
from bmgit.config._load import safe_load_config
from bmgit.config._loader import (
    copy_value,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from bmgit.config._models import (
    APP_NAME,
    Config,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StorageConfig,
    TrackerConfig,
    UserConfig,
    get_user_config_path,
)

__all__ = [
    "APP_NAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StorageConfig",
    "TrackerConfig",
    "UserConfig",
    "copy_value",
    "deep_merge",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]

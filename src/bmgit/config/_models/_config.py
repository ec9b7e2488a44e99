# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

Sources are merged in precedence order (defaults, config file, environment,
command line) and the merged dictionary is validated into frozen section
models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

import platformdirs
import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from bmgit.config._defaults import DEFAULT_CONFIG
from bmgit.config._loader import copy_value, deep_merge, parse_env_vars, read_toml_file
from bmgit.config._models._common import ConfigSource, ConfigSourceName
from bmgit.config._models._sections import (
    APP_NAME,
    LoggingConfig,
    StorageConfig,
    TrackerConfig,
    UserConfig,
)
from bmgit.exceptions import ConfigValidationError
from bmgit.repository import GitConfig, UserIdentity

if TYPE_CHECKING:
    from pathlib import Path


def get_user_config_path() -> Path:
    """Platform-specific user config file path (may not exist)."""
    return platformdirs.user_config_path(APP_NAME) / "config.toml"


def _validation_error(e: ValidationError, source: str | None) -> ConfigValidationError:
    error = e.errors()[0]
    key = ".".join(str(part) for part in error["loc"])
    ctx = error.get("ctx") or {}
    expected = str(ctx.get("expected", error["msg"]))
    msg = f"Invalid configuration value for '{key}'"
    return ConfigValidationError(
        msg,
        key=key,
        value=error.get("input"),
        expected=expected,
        source=source,
    )


class Config(BaseModel):
    """Immutable, typed application configuration.

    Use the factory methods rather than the constructor.

    Example:
        >>> config = Config.from_dict({"tracker": {"commit_delay": 2}})
        >>> config.tracker.commit_delay
        2.0
        >>> config.get("user.name")
        'Bookmark Git Tracker'
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    user: UserConfig = Field(default_factory=UserConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def _build(
        cls,
        merged: dict[str, Any],
        sources: tuple[ConfigSource, ...],
        *,
        source: str | None = None,
    ) -> Self:
        try:
            config = cls.model_validate(merged)
        except ValidationError as e:
            raise _validation_error(e, source) from e
        config._data = merged
        config._sources = sources
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If a value is invalid.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from one TOML file merged over the defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If a value is invalid.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.FILE, path=path, exists=True, values=data
        )
        return cls._build(deep_merge(DEFAULT_CONFIG, data), (source,), source=str(path))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
        environ: dict[str, str] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Precedence, lowest to highest: defaults, config file, ``BMGIT_*``
        environment variables, command line overrides. A missing config file
        is skipped.

        Args:
            config_path: Config file (defaults to the platform user config).
            include_env: Include environment variables.
            cli_overrides: Command line overrides.
            environ: Environment to read instead of ``os.environ``.

        Raises:
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If the merged config is invalid.
        """
        path = config_path if config_path is not None else get_user_config_path()
        exists = path.is_file()

        sources = [
            ConfigSource(
                name=ConfigSourceName.DEFAULT,
                path=None,
                exists=True,
                values=copy_value(DEFAULT_CONFIG),
            ),
            ConfigSource(
                name=ConfigSourceName.FILE,
                path=path,
                exists=exists,
                values=read_toml_file(path) if exists else {},
            ),
        ]
        if include_env:
            env_values = parse_env_vars(environ=environ)
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.ENV,
                    path=None,
                    exists=bool(env_values),
                    values=env_values,
                )
            )
        if cli_overrides:
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.CLI,
                    path=None,
                    exists=True,
                    values=cli_overrides,
                )
            )

        merged: dict[str, Any] = {}
        for source in sources:
            if source.values:
                merged = deep_merge(merged, source.values)

        return cls._build(merged, tuple(reversed(sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Sources that contributed, highest precedence first."""
        return list(self._sources)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key (``"tracker.commit_delay"``)."""
        current: Any = self._data or self.model_dump(mode="json")
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def git_config(self) -> GitConfig:
        """Git configuration seeded into a new repository."""
        return GitConfig(user=UserIdentity(name=self.user.name, email=self.user.email))

    def to_dict(self, *, include_defaults: bool = True) -> dict[str, Any]:
        """Convert to a dictionary, optionally only the non-default values."""
        data = self.model_dump(mode="json")
        if include_defaults:
            return data
        return _diff_from_defaults(data, DEFAULT_CONFIG)

    def to_toml(self, *, include_defaults: bool = False) -> str:
        """Convert to a TOML string."""
        return tomli_w.dumps(self.to_dict(include_defaults=include_defaults))


def _diff_from_defaults(
    data: dict[str, Any],
    defaults: dict[str, Any],
) -> dict[str, Any]:
    result: dict[str, Any] = {}

    for key, value in data.items():
        if key not in defaults:
            result[key] = copy_value(value)
        elif isinstance(value, dict) and isinstance(defaults[key], dict):
            nested_diff = _diff_from_defaults(value, defaults[key])
            if nested_diff:
                result[key] = nested_diff
        elif value != defaults[key]:
            result[key] = copy_value(value)

    return result

# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading, merging and environment parsing of bmgit configuration."""

from __future__ import annotations

import os
import tomllib
from typing import TYPE_CHECKING, Any

import orjson

from bmgit.config._defaults import ENV_PREFIX
from bmgit.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pathlib import Path


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=e.lineno,
            column=e.colno,
        ) from e


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Return an independent copy of a nested dict/list configuration value."""
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Merge ``override`` into ``base``, recursing into nested tables.

    Returns a new dictionary; neither input is modified. Tables merge
    recursively, everything else in ``override`` replaces the base value.

    Args:
        base: Lower precedence configuration.
        override: Higher precedence configuration.

    Returns:
        Merged configuration dictionary.
    """
    result: dict[str, Any] = {k: copy_value(v) for k, v in base.items()}  # pyright: ignore[reportExplicitAny]

    for key, override_val in override.items():
        base_val = result.get(key)
        if isinstance(base_val, dict) and isinstance(override_val, dict):
            result[key] = deep_merge(base_val, override_val)
        else:
            result[key] = copy_value(override_val)

    return result


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse a string with type inference.

    Precedence: boolean words, integer, float (with a decimal point), JSON
    array or object, then the string itself.

    Examples:
        >>> parse_string_value("true")
        True
        >>> parse_string_value("2")
        2
        >>> parse_string_value("0.5")
        0.5
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    try:
        return int(value)
    except ValueError:
        pass

    if "." in value:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path, creating intermediate tables.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "tracker.commit_delay", 2)
        >>> d
        {'tracker': {'commit_delay': 2}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a nested config dictionary.

    Only variables naming a section key are used: ``BMGIT_TRACKER__COMMIT_DELAY``
    maps to ``tracker.commit_delay``. Plain variables such as ``BMGIT_DEBUG``
    are left to the logging setup.

    Args:
        prefix: Environment variable prefix.
        environ: Environment to read (defaults to ``os.environ``).

    Returns:
        Dictionary of parsed config values.
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in source.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if "__" not in config_key:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_string_value(value))

    return result

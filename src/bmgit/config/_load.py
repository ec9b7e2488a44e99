"""Configuration loading with error handling for command line entry points."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from bmgit.config._models import Config
from bmgit.exceptions import ConfigError

if TYPE_CHECKING:
    from pathlib import Path


def _fail_or_warn(message: str, *, strict: bool) -> tuple[Config, str]:
    if strict:
        print(f"Error: {message}", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    print(f"Warning: {message}", file=sys.stderr)  # noqa: T201
    return Config.from_dict({}), message


def safe_load_config(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration, degrading to defaults on error.

    When BMGIT_STRICT_CONFIG is "1" any error exits with status 1; otherwise
    a warning is printed to stderr and the defaults are returned. An
    explicitly requested config file that does not exist always exits.

    Args:
        config_path: Explicit path to a config file (--config flag).
        cli_overrides: Command line overrides.

    Returns:
        Tuple of (Config, error_message). error_message is None on success.
    """
    strict_mode = os.environ.get("BMGIT_STRICT_CONFIG", "0") == "1"

    if config_path is not None and not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    try:
        config = Config.load(config_path=config_path, cli_overrides=cli_overrides)
    except ConfigError as e:
        return _fail_or_warn(f"Failed to load config: {e}", strict=strict_mode)
    except OSError as e:
        return _fail_or_warn(f"Failed to load config: {e}", strict=strict_mode)
    return config, None

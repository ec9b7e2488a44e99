"""Shared utilities: logging factories and JSON file helpers."""

from bmgit.utils._json import read_json, write_json_atomic
from bmgit.utils._logging import (
    create_cli_logger,
    create_logger,
    get_default_log_file,
    get_log_level,
)

__all__ = [
    "create_cli_logger",
    "create_logger",
    "get_default_log_file",
    "get_log_level",
    "read_json",
    "write_json_atomic",
]

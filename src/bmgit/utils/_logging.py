"""Logging utilities for bmgit.

Standalone structlog logger factories writing JSON or text logs to a file.
Each logger is self-contained and does not modify global structlog
configuration.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import platformdirs
import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

LOG_APP_NAME = "bmgit"


def get_default_log_file() -> Path:
    """Default log file in the platform log directory."""
    return platformdirs.user_log_path(LOG_APP_NAME) / "bmgit.log"


def get_log_level(level: str | None = None) -> int:
    """Resolve the effective log level.

    BMGIT_DEBUG forces DEBUG. Otherwise ``level`` is used when given, then
    BMGIT_LOG_LEVEL, then INFO.

    Args:
        level: Optional level name (debug, info, warning, error).

    Returns:
        The logging level as an integer.
    """
    if getenv("BMGIT_DEBUG", None):
        return logging.DEBUG

    name = level if level is not None else getenv("BMGIT_LOG_LEVEL", "info")
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def create_logger(
    log_file_path: str | Path,
    *,
    log_level: int | None = None,
    log_format: LogFormatType = "json",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> FilteringBoundLogger:
    """Create a structlog logger that writes to one file.

    Args:
        log_file_path: Log file, opened in append mode.
        log_level: Level threshold (resolved from the environment if None).
        log_format: "json" or "text".
        max_bytes: Rotate after this many bytes; needs backup_count too.
        backup_count: Number of rotated files to keep; needs max_bytes too.

    Returns:
        The logger.
    """
    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    effective_level = log_level if log_level is not None else get_log_level()

    if max_bytes is not None and backup_count is not None:
        stdlib_logger = logging.getLogger(f"bmgit.{log_path.stem}.{id(log_path)}")
        stdlib_logger.handlers.clear()
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(effective_level)

        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        handler.setLevel(effective_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        stdlib_logger.addHandler(handler)
        raw_logger: object = stdlib_logger
    else:
        raw_logger = structlog.WriteLoggerFactory(file=log_path.open("a"))()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
) -> FilteringBoundLogger:
    """Create the file logger used by one CLI invocation.

    The command name, when given, is bound to every entry. BMGIT_DEBUG
    overrides the configured level.

    Args:
        level: Log level threshold.
        log_format: "json" or "text".
        log_file: Log file (default: the platform log directory).
        command: Name of the CLI command.

    Returns:
        A FilteringBoundLogger instance.
    """
    effective_file = log_file or get_default_log_file()
    logger = create_logger(
        effective_file,
        log_level=get_log_level(level),
        log_format=log_format,
    )
    if command:
        return logger.bind(command=command)
    return logger

# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

- Standardized exit codes
- Output formatters
- Construction of the tracker stack from the CLI context
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

import orjson
import tomli_w
from rich.console import Console

from bmgit.exceptions import BmgitError
from bmgit.repository import CommitStore
from bmgit.sources import BookmarkFileSource, StaticTreeSource
from bmgit.storage import SQLiteStore
from bmgit.tracker import BookmarkTracker, ChangeHistoryLog

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from bmgit.cli._context import CLIContext
    from bmgit.tracker import TreeSource

FormattableData = dict[str, Any]


class ExitCode(IntEnum):
    """Standard exit codes for bmgit commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def format_json(data: Any, *, indent: bool = True) -> str:
    """Format data as JSON."""
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def format_toml(data: FormattableData) -> str:
    """Format data as TOML."""
    return tomli_w.dumps(data)


def get_console(ctx: CLIContext) -> Console:
    """Console for regular output honouring --no-color and --quiet."""
    return Console(no_color=ctx.no_color, quiet=ctx.quiet)


def get_error_console() -> Console:
    """Console writing to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the given code.

    Raises:
        SystemExit: Always.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)


def confirm_destructive(message: str, *, force: bool, console: Console) -> bool:
    """Ask before a destructive operation.

    Without a TTY the answer is no unless --yes was given.

    Returns:
        True if the operation should proceed.
    """
    if force:
        return True
    if not sys.stdin.isatty():
        return False

    try:
        console.print(f"[yellow]{message}[/yellow]")
        response = console.input("[bold]Confirm (y/N): [/bold]")
    except (EOFError, KeyboardInterrupt):
        return False
    return response.lower() in ("y", "yes")


def resolve_source(ctx: CLIContext, bookmarks: Path | None = None) -> TreeSource | None:
    """Pick the tree source: --bookmarks, then ``tracker.bookmarks_file``.

    Returns:
        The source, or None when no bookmarks file is configured.
    """
    if bookmarks is not None:
        return BookmarkFileSource(bookmarks, logger=ctx.logger)
    if ctx.config.tracker.bookmarks_file:
        return BookmarkFileSource(ctx.config.tracker.bookmarks_file, logger=ctx.logger)
    return None


def build_store(ctx: CLIContext) -> CommitStore:
    """Open the commit store on the configured database.

    Raises:
        SystemExit: If the database cannot be opened.
    """
    try:
        storage = SQLiteStore(ctx.database_path, logger=ctx.logger)
    except BmgitError as e:
        exit_with_error(str(e), ExitCode.IO_ERROR)
    return CommitStore(
        storage,
        default_config=ctx.config.git_config(),
        logger=ctx.logger,
    )


@asynccontextmanager
async def open_tracker(
    ctx: CLIContext,
    source: TreeSource | None = None,
) -> AsyncIterator[BookmarkTracker]:
    """Build and enter a tracker from the CLI context.

    Without a source, an empty static tree is used; commands that need
    the real tree check for a source first.
    """
    store = build_store(ctx)
    history = ChangeHistoryLog(
        store.storage,
        limit=ctx.config.tracker.history_limit,
        logger=ctx.logger,
    )
    tracker = BookmarkTracker(
        store,
        source if source is not None else StaticTreeSource(),
        history=history,
        quiet_period=ctx.config.tracker.commit_delay,
        auto_commit=ctx.config.tracker.auto_commit,
        logger=ctx.logger,
    )
    async with tracker:
        yield tracker

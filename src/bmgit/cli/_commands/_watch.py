# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, TC003
"""Long-running watch of a Chromium bookmarks file."""

import signal
from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import Parameter

from bmgit.cli._context import CLIContext
from bmgit.cli._shared import (
    ExitCode,
    exit_with_error,
    get_console,
    open_tracker,
    resolve_source,
)
from bmgit.exceptions import BmgitError
from bmgit.sources import BookmarkFileSource, watch_bookmark_file


def watch(
    *,
    bookmarks: Annotated[
        Path | None,
        Parameter(name="--bookmarks", help="Chromium Bookmarks file to watch"),
    ] = None,
) -> None:
    """Commit bookmark changes as they happen

    Runs until interrupted. Bursts of changes are coalesced into one commit
    after ``tracker.commit_delay`` seconds without further changes; pending
    changes are committed on shutdown.

    Args:
        bookmarks: Chromium Bookmarks file to watch.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)
    source = resolve_source(ctx, bookmarks)
    if not isinstance(source, BookmarkFileSource):
        exit_with_error(
            "No bookmarks file configured; pass --bookmarks or set "
            "tracker.bookmarks_file",
            ExitCode.VALIDATION_ERROR,
        )
    if not ctx.config.tracker.auto_commit:
        console.print(
            "[yellow]tracker.auto_commit is off; changes are ignored[/yellow]"
        )

    async def run() -> tuple[int, str | None]:
        stop_event = anyio.Event()
        forwarded = 0
        error: str | None = None

        async def handle_signals() -> None:
            with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
                async for _signum in signals:
                    stop_event.set()
                    break

        async with open_tracker(ctx, source) as tracker:
            setup = await tracker.initialize()
            if not setup.success:
                return 0, setup.error

            console.print(f"Watching [bold]{source.path}[/bold] (Ctrl+C to stop)")
            async with anyio.create_task_group() as tg:
                tg.start_soon(handle_signals)
                try:
                    forwarded = await watch_bookmark_file(
                        source.path,
                        tracker,
                        stop_event=stop_event,
                        logger=ctx.logger,
                    )
                except BmgitError as e:
                    error = str(e)
                tg.cancel_scope.cancel()

        return forwarded, error

    forwarded, error = anyio.run(run)
    if error is not None:
        exit_with_error(error, ExitCode.IO_ERROR)
    console.print(f"Stopped after {forwarded} changes")

# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, FBT002, A002, TC003
"""Repository commands: init, snapshot, log, show, diff, stats, history, reset."""

from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import Parameter
from rich.table import Table

from bmgit.cli._context import CLIContext, OutputFormat
from bmgit.cli._shared import (
    ExitCode,
    build_store,
    confirm_destructive,
    exit_with_error,
    format_json,
    get_console,
    open_tracker,
    resolve_source,
)
from bmgit.exceptions import BmgitError, CommitNotFoundError
from bmgit.repository import CommitSummary, ms_to_iso
from bmgit.tracker import MANUAL_SNAPSHOT_MESSAGE, OperationResult

FormatOption = Annotated[
    OutputFormat,
    Parameter(name=["--format", "-f"], help="Output format (text, json)"),
]
BookmarksOption = Annotated[
    Path | None,
    Parameter(name="--bookmarks", help="Chromium Bookmarks file to read"),
]


def _summary_to_dict(entry: CommitSummary) -> dict[str, object]:
    return {
        "hash": entry.hash,
        "short_hash": entry.short_hash,
        "message": entry.message,
        "author": entry.author.model_dump(),
        "parent": entry.parent,
        "origin": entry.origin,
        "stats": entry.stats.model_dump(),
        "date": entry.date,
    }


def init(*, bookmarks: BookmarksOption = None) -> None:
    """Initialize the repository

    Creates an empty repository if none exists. When a bookmarks file is
    configured (or given with --bookmarks) and the history is empty, an
    initial snapshot is committed.

    Args:
        bookmarks: Chromium Bookmarks file to snapshot.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)
    source = resolve_source(ctx, bookmarks)

    async def run() -> None:
        if source is None:
            store = build_store(ctx)
            try:
                await store.initialize()
            except BmgitError as e:
                exit_with_error(str(e), ExitCode.IO_ERROR)
            console.print(f"Initialized empty repository in {ctx.database_path}")
            return

        async with open_tracker(ctx, source) as tracker:
            result = await tracker.initialize()
        if not result.success:
            exit_with_error(result.error or "Initialization failed")
        if result.commit_hash:
            console.print(f"Initial snapshot [bold]{result.commit_hash[:8]}[/bold]")
        else:
            console.print(result.message or "Repository already initialized")

    anyio.run(run)


def snapshot(
    *,
    message: Annotated[
        str,
        Parameter(name=["--message", "-m"], help="Commit message"),
    ] = MANUAL_SNAPSHOT_MESSAGE,
    bookmarks: BookmarksOption = None,
) -> None:
    """Commit the current bookmark tree

    Args:
        message: Commit message.
        bookmarks: Chromium Bookmarks file to snapshot.
    """
    ctx = CLIContext.get_current()
    source = resolve_source(ctx, bookmarks)
    if source is None:
        exit_with_error(
            "No bookmarks file configured; pass --bookmarks or set "
            "tracker.bookmarks_file",
            ExitCode.VALIDATION_ERROR,
        )

    async def run() -> None:
        # SystemExit must not be raised inside the tracker's task group
        async with open_tracker(ctx, source) as tracker:
            try:
                await tracker.store.initialize()
            except BmgitError as e:
                result = OperationResult(success=False, error=str(e))
            else:
                result = await tracker.create_manual_snapshot(message)
        if not result.success:
            exit_with_error(result.error or "Snapshot failed")
        get_console(ctx).print(
            f"Created snapshot [bold]{(result.commit_hash or '')[:8]}[/bold]: {message}"
        )

    anyio.run(run)


def log(
    *,
    limit: Annotated[
        int,
        Parameter(name=["--limit", "-n"], help="Maximum number of commits"),
    ] = 50,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show commit history, newest first

    Args:
        limit: Maximum number of commits to show.
        format: Output format.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)

    async def run() -> list[CommitSummary]:
        async with open_tracker(ctx) as tracker:
            return await tracker.get_commit_history(limit)

    history = anyio.run(run)

    if format == OutputFormat.JSON:
        print(format_json([_summary_to_dict(entry) for entry in history]))  # noqa: T201
        return

    if not history:
        console.print("[dim]No commits yet[/dim]")
        return

    table = Table(box=None)
    table.add_column("Commit", style="yellow")
    table.add_column("Date")
    table.add_column("Origin", style="cyan")
    table.add_column("Bookmarks", justify="right")
    table.add_column("Folders", justify="right")
    table.add_column("Message")
    for entry in history:
        table.add_row(
            entry.short_hash,
            entry.date,
            entry.origin,
            str(entry.stats.leaf_count),
            str(entry.stats.container_count),
            entry.message,
        )
    console.print(table)


def show(
    commit: str,
    /,
    *,
    data: Annotated[
        bool,
        Parameter(name="--data", help="Print the stored bookmark tree"),
    ] = False,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show one commit

    Args:
        commit: Full or abbreviated commit hash.
        data: Print the stored bookmark tree as JSON.
        format: Output format.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)
    store = build_store(ctx)

    async def run() -> None:
        try:
            commit_hash = await store.resolve_hash(commit)
            record = await store.get_commit(commit_hash)
        except CommitNotFoundError as e:
            exit_with_error(str(e), ExitCode.NOT_FOUND)
        except BmgitError as e:
            exit_with_error(str(e), ExitCode.IO_ERROR)

        if record is None:
            exit_with_error(f"Commit not found: {commit}", ExitCode.NOT_FOUND)

        if data:
            print(format_json(record.data))  # noqa: T201
            return
        if format == OutputFormat.JSON:
            payload = record.model_dump(mode="json", exclude={"data"})
            print(format_json(payload))  # noqa: T201
            return

        console.print(f"[yellow]commit {record.hash}[/yellow]")
        if record.parent:
            console.print(f"Parent:  {record.parent}")
        console.print(f"Author:  {record.author.name} <{record.author.email}>")
        console.print(f"Date:    {ms_to_iso(record.committer.timestamp)}")
        console.print(f"Origin:  {record.origin}")
        console.print(
            f"Stats:   {record.stats.leaf_count} bookmarks, "
            f"{record.stats.container_count} folders"
        )
        console.print(f"\n    {record.message}")

    anyio.run(run)


def diff(
    commit_a: str,
    commit_b: str,
    /,
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Compare the bookmark and folder counts of two commits

    Args:
        commit_a: Older commit (full or abbreviated hash).
        commit_b: Newer commit (full or abbreviated hash).
        format: Output format.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)
    store = build_store(ctx)

    async def run() -> None:
        try:
            hash_a = await store.resolve_hash(commit_a)
            hash_b = await store.resolve_hash(commit_b)
            result = await store.get_commit_diff(hash_a, hash_b)
        except CommitNotFoundError as e:
            exit_with_error(str(e), ExitCode.NOT_FOUND)
        except BmgitError as e:
            exit_with_error(str(e), ExitCode.IO_ERROR)

        if result is None:
            exit_with_error("Commit data not found", ExitCode.NOT_FOUND)

        rows = {"bookmarks": result.bookmarks, "folders": result.folders}
        if format == OutputFormat.JSON:
            payload = {
                kind: {
                    "added": delta.added,
                    "removed": delta.removed,
                    "changed": delta.changed,
                }
                for kind, delta in rows.items()
            }
            print(format_json(payload))  # noqa: T201
            return

        table = Table(title=f"{hash_a[:8]}..{hash_b[:8]}", box=None)
        table.add_column("")
        table.add_column("Added", justify="right", style="green")
        table.add_column("Removed", justify="right", style="red")
        table.add_column("Changed", justify="right")
        for kind, delta in rows.items():
            table.add_row(
                kind, str(delta.added), str(delta.removed), str(delta.changed)
            )
        console.print(table)

    anyio.run(run)


def stats(*, format: FormatOption = OutputFormat.TEXT) -> None:
    """Show repository statistics

    Args:
        format: Output format.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)

    async def run() -> None:
        async with open_tracker(ctx) as tracker:
            result = await tracker.get_repository_stats()
            status = await tracker.get_status()
        if result is None:
            exit_with_error("Failed to read repository statistics", ExitCode.IO_ERROR)

        payload: dict[str, object] = {
            "initialized": result.initialized,
            "total_commits": result.total_commits,
            "branch_count": result.branch_count,
            "current_branch": result.current_branch,
            "head_commit": result.head_commit,
            "created": ms_to_iso(result.created) if result.created else None,
            "last_commit": (
                ms_to_iso(result.last_commit_timestamp)
                if result.last_commit_timestamp
                else None
            ),
            "pending_changes": status.pending_changes,
        }
        if format == OutputFormat.JSON:
            print(format_json(payload))  # noqa: T201
            return

        table = Table(show_header=False, box=None)
        table.add_column(style="bold")
        table.add_column()
        for key, value in payload.items():
            table.add_row(key.replace("_", " "), "-" if value is None else str(value))
        console.print(table)

    anyio.run(run)


def history(
    *,
    limit: Annotated[
        int | None,
        Parameter(name=["--limit", "-n"], help="Maximum number of entries"),
    ] = None,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show recorded change bursts, newest first

    Args:
        limit: Maximum number of entries.
        format: Output format.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)

    async def run() -> None:
        async with open_tracker(ctx) as tracker:
            entries = await tracker.get_change_history(limit)

        if format == OutputFormat.JSON:
            payload = [entry.model_dump(mode="json") for entry in entries]
            print(format_json(payload))  # noqa: T201
            return
        if not entries:
            console.print("[dim]No recorded changes[/dim]")
            return

        table = Table(box=None)
        table.add_column("Date")
        table.add_column("Events", justify="right")
        table.add_column("Commit", style="yellow")
        table.add_column("Message")
        for entry in entries:
            commit = entry.commit_hash[:8] if entry.commit_hash else "[red]failed[/red]"
            table.add_row(
                ms_to_iso(entry.timestamp),
                str(len(entry.changes)),
                commit,
                entry.commit_message,
            )
        console.print(table)

    anyio.run(run)


def reset(
    *,
    yes: Annotated[
        bool,
        Parameter(name=["--yes", "-y"], help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Discard all history and start with an empty repository

    Args:
        yes: Skip the confirmation prompt.
    """
    ctx = CLIContext.get_current()
    console = get_console(ctx)

    if not confirm_destructive(
        "Discard the entire bookmark history?", force=yes, console=console
    ):
        console.print("Aborted")
        return

    async def run() -> None:
        async with open_tracker(ctx) as tracker:
            result = await tracker.reset_repository()
        if not result.success:
            exit_with_error(result.error or "Reset failed", ExitCode.IO_ERROR)
        console.print("Repository reset")

    anyio.run(run)

# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, TC003
"""Export and import of whole repositories as JSON bundles."""

from pathlib import Path

import anyio

from bmgit.cli._context import CLIContext
from bmgit.cli._shared import ExitCode, exit_with_error, get_console, open_tracker
from bmgit.exceptions import BmgitError
from bmgit.tracker import OperationResult
from bmgit.utils import read_json, write_json_atomic


def export(file: Path, /) -> None:
    """Write the repository to a JSON bundle

    Args:
        file: Destination file.
    """
    ctx = CLIContext.get_current()

    async def run() -> None:
        async with open_tracker(ctx) as tracker:
            bundle = await tracker.export_repository()
        if bundle is None:
            exit_with_error("Repository not initialized", ExitCode.NOT_FOUND)

        try:
            write_json_atomic(file, bundle.to_dict())
        except BmgitError as e:
            exit_with_error(str(e), ExitCode.IO_ERROR)

        get_console(ctx).print(
            f"Exported {len(bundle.commits)} commits to [bold]{file}[/bold]"
        )

    anyio.run(run)


def import_(file: Path, /) -> None:
    """Replace the repository with a JSON bundle

    The bundle is validated first; a rejected bundle leaves the current
    repository untouched.

    Args:
        file: Bundle written by ``bmgit export``.
    """
    ctx = CLIContext.get_current()

    try:
        data = read_json(file)
    except BmgitError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR)

    async def run() -> OperationResult:
        async with open_tracker(ctx) as tracker:
            return await tracker.import_repository(data)

    result = anyio.run(run)
    if not result.success:
        exit_with_error(result.error or "Import failed", ExitCode.VALIDATION_ERROR)

    commits = data.get("commits")
    count = len(commits) if isinstance(commits, dict) else 0
    get_console(ctx).print(f"Imported {count} commits from [bold]{file}[/bold]")

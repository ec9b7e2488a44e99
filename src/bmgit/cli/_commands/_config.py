# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportExplicitAny=false, reportAny=false
# ruff: noqa: D415, FBT002, A002
"""Config commands for viewing bmgit configuration."""

from typing import Annotated, Any

import orjson
from cyclopts import App, Parameter
from rich.table import Table

from bmgit.cli._context import CLIContext, OutputFormat
from bmgit.cli._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    format_toml,
    get_console,
)
from bmgit.config import get_user_config_path

app = App(name="config", help="View bmgit configuration", help_on_error=True)


def _format_plain(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict | list):
        return orjson.dumps(value).decode("utf-8")
    return str(value)


@app.command(name="show")
def _show(
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json)"),
    ] = OutputFormat.TOML,
    no_defaults: Annotated[
        bool,
        Parameter(name="--no-defaults", help="Exclude default values"),
    ] = False,
) -> None:
    """Display merged configuration

    Args:
        format: Output format (toml, json).
        no_defaults: Exclude default values from output.
    """
    ctx = CLIContext.get_current()
    data = ctx.config.to_dict(include_defaults=not no_defaults)

    match format:
        case OutputFormat.JSON:
            output = format_json(data)
        case _:
            output = format_toml(data)

    print(output.rstrip())  # noqa: T201


@app.command(name="get")
def _get(
    key: str,
    /,
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (text, json)"),
    ] = OutputFormat.TEXT,
) -> None:
    """Get a specific configuration value

    Args:
        key: Dot-notation key path (e.g., tracker.commit_delay).
        format: Output format (text, json).
    """
    ctx = CLIContext.get_current()
    missing = object()
    value = ctx.config.get(key, missing)
    if value is missing:
        exit_with_error(f"Key '{key}' not found", ExitCode.NOT_FOUND)

    if format == OutputFormat.JSON:
        print(orjson.dumps(value).decode("utf-8"))  # noqa: T201
    else:
        print(_format_plain(value))  # noqa: T201


@app.command(name="sources")
def _sources() -> None:
    """List configuration sources, highest precedence first"""
    ctx = CLIContext.get_current()
    table = Table(box=None)
    table.add_column("Source", style="bold")
    table.add_column("Path")
    table.add_column("Exists")
    for source in ctx.config.sources:
        table.add_row(
            source.name.value,
            str(source.path) if source.path else "-",
            "yes" if source.exists else "no",
        )
    get_console(ctx).print(table)
    if ctx.config_error:
        get_console(ctx).print(f"[yellow]Warning:[/yellow] {ctx.config_error}")


@app.command(name="path")
def _path() -> None:
    """Print the user config file path"""
    print(get_user_config_path())  # noqa: T201

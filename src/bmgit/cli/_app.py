"""The command-line interface for bmgit."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from bmgit.config import safe_load_config
from bmgit.utils import create_cli_logger

from ._commands import register_commands
from ._context import CLIContext

APP_HELP = "Versioned history for a browser bookmark tree."


def build_context(
    command: str,
    *,
    config_path: Path | None = None,
    database: Path | None = None,
    verbose: bool = False,
    quiet: bool = False,
    no_color: bool = False,
) -> CLIContext:
    """Load configuration and create the logger for one CLI invocation.

    ``--verbose`` raises the log level to debug; it does not change what is
    printed.
    """
    overrides: dict[str, object] | None = (
        {"logging": {"level": "debug"}} if verbose else None
    )
    config, config_error = safe_load_config(
        config_path=config_path, cli_overrides=overrides
    )
    logger = create_cli_logger(
        level=config.logging.level.value,
        log_format=config.logging.format.value,  # type: ignore[arg-type]
        log_file=config.logging.file,
        command=command,
    )
    return CLIContext(
        config=config,
        verbose=verbose,
        quiet=quiet,
        no_color=no_color,
        database=database,
        config_error=config_error,
        logger=logger,
    )


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    app = App(
        name="bmgit",
        help=APP_HELP,
        help_on_error=True,
        console=console or Console(),
        error_console=error_console or Console(stderr=True),
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Log at debug level")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        db: Annotated[
            Path | None, Parameter(name="--db", help="Repository database to use")
        ] = None,
    ) -> None:
        """Run a bmgit command.

        Args:
            tokens: Command and its arguments.
            verbose: Log at debug level.
            quiet: Suppress non-essential output.
            no_color: Disable colored output.
            config: Config file to load instead of the user config.
            db: Repository database overriding ``storage.path``.
        """
        CLIContext.set_current(
            build_context(
                tokens[0] if tokens else "",
                config_path=config,
                database=db,
                verbose=verbose,
                quiet=quiet,
                no_color=no_color,
            )
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Entry point of the ``bmgit`` console script."""
    create_app().meta()


if __name__ == "__main__":
    main()

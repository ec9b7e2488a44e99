# pyright: reportUnusedCallResult=false
"""Per-invocation state shared by all commands.

The meta command builds one ``CLIContext`` from the global flags and stores
it in a context variable; commands read it with ``CLIContext.get_current()``.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from bmgit.config import Config


class OutputFormat(StrEnum):
    """Output formats accepted by ``--format``."""

    TEXT = "text"
    JSON = "json"
    TOML = "toml"


_active: contextvars.ContextVar[CLIContext | None] = contextvars.ContextVar(
    "bmgit_cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Configuration and global flags of the running command.

    Attributes:
        config: Merged configuration.
        verbose: Whether ``--verbose`` was given.
        quiet: Whether ``--quiet`` was given.
        no_color: Whether ``--no-color`` was given.
        database: ``--db`` path, taking precedence over ``storage.path``.
        config_error: Why the configuration fell back to defaults, if it did.
        logger: File logger bound to the command name.
    """

    config: Config = field(repr=False)
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False
    database: Path | None = None
    config_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)

    @property
    def database_path(self) -> Path:
        """Database the command operates on."""
        if self.database is not None:
            return self.database
        return self.config.storage.database_path

    @classmethod
    def get_current(cls) -> CLIContext:
        """Return the active context, or one built from default config."""
        active = _active.get()
        if active is not None:
            return active

        from bmgit.config import Config  # noqa: PLC0415

        return cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        """Make ``ctx`` the active context."""
        _active.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Clear the active context."""
        _active.set(None)

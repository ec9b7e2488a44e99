"""bmgit CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._repo import diff, history, init, log, reset, show, snapshot, stats
from ._transfer import export, import_
from ._watch import watch

if TYPE_CHECKING:
    from cyclopts import App

__all__ = ["config_app", "register_commands"]


def register_commands(app: App) -> None:
    app.command(init)
    app.command(snapshot)
    app.command(log)
    app.command(show)
    app.command(diff)
    app.command(stats)
    app.command(history)
    app.command(export)
    app.command(import_, name="import")
    app.command(reset)
    app.command(watch)
    app.command(config_app)

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import orjson
import pytest
from rich.console import Console

from bmgit.cli import CLIContext, create_app
from tests.factories import chromium_url, make_chromium_file


@dataclass(frozen=True, slots=True)
class CliEnv:
    """Paths used by an isolated CLI run."""

    config: Path
    database: Path
    bookmarks: Path
    log_file: Path

    def write_bookmarks(self, *urls: str) -> None:
        bar = [chromium_url(str(10 + i), url, url) for i, url in enumerate(urls)]
        self.bookmarks.write_bytes(orjson.dumps(make_chromium_file(bar=bar)))


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliEnv:
    """Isolated config, database, log file and bookmarks file."""
    for name in ("BMGIT_DEBUG", "BMGIT_LOG_LEVEL", "BMGIT_STRICT_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("BMGIT_TRACKER__BOOKMARKS_FILE", raising=False)
    monkeypatch.setenv("COLUMNS", "200")

    log_file = tmp_path / "logs" / "bmgit.log"
    config = tmp_path / "config.toml"
    config.write_text(f'[logging]\nfile = "{log_file.as_posix()}"\n')

    env = CliEnv(
        config=config,
        database=tmp_path / "data" / "repository.db",
        bookmarks=tmp_path / "Bookmarks",
        log_file=log_file,
    )
    env.write_bookmarks("https://a", "https://b", "https://c")
    CLIContext.reset()
    return env


@pytest.fixture
def bmgit_cli(console: Console, cli_env: CliEnv) -> Callable[..., int]:
    """Run the CLI with the isolated environment and return the exit code."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        tokens = ["--config", str(cli_env.config), "--db", str(cli_env.database)]
        try:
            app.meta([*tokens, *args])
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run

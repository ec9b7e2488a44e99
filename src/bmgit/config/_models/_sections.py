"""Configuration section models."""

from pathlib import Path
from typing import ClassVar

import platformdirs
from pydantic import BaseModel, ConfigDict, Field

from bmgit.config._models._common import LogFormat, LogLevel
from bmgit.repository import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME

APP_NAME = "bmgit"


class UserConfig(BaseModel):
    """Identity written into new commits.

    Attributes:
        name: Author and committer name.
        email: Author and committer email.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = DEFAULT_AUTHOR_NAME
    email: str = DEFAULT_AUTHOR_EMAIL


class TrackerConfig(BaseModel):
    """Change tracking settings.

    Attributes:
        auto_commit: Commit mutation bursts automatically.
        commit_delay: Debounce quiet period in seconds.
        history_limit: Maximum change history entries kept.
        bookmarks_file: Chromium ``Bookmarks`` file to track (empty: none).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    auto_commit: bool = True
    commit_delay: float = Field(default=1.0, ge=0)
    history_limit: int = Field(default=100, ge=1)
    bookmarks_file: str = ""


class StorageConfig(BaseModel):
    """Persistence settings.

    Attributes:
        path: SQLite database path (empty: platform data directory).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = ""

    @property
    def database_path(self) -> Path:
        """Resolved database path."""
        if self.path:
            return Path(self.path).expanduser()
        return platformdirs.user_data_path(APP_NAME) / "repository.db"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty: platform log directory).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""

# pyright: reportAny=false, reportExplicitAny=false
"""Commit store models.

Persisted records (repository metadata, commits, git configuration and the
export bundle) are Pydantic models so they can be validated when read back
or imported. Query results handed to callers are frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pendulum
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from bmgit.tree import Snapshot, TreeStats

DEFAULT_BRANCH = "main"
DEFAULT_AUTHOR_NAME = "Bookmark Git Tracker"
DEFAULT_AUTHOR_EMAIL = "bookmark-tracker@extension.local"
EXPORT_FORMAT_VERSION = "1.0.0"


def now_ms() -> int:
    """Current UTC time in epoch milliseconds."""
    return int(pendulum.now("UTC").timestamp() * 1000)


def ms_to_iso(timestamp: int) -> str:
    """Format an epoch-milliseconds timestamp as an ISO 8601 UTC string."""
    return pendulum.from_timestamp(timestamp / 1000, tz="UTC").to_iso8601_string()


class Signature(BaseModel):
    """Author or committer identity with the time of the action.

    Attributes:
        name: Display name.
        email: Email address.
        timestamp: Epoch milliseconds.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    name: str
    email: str
    timestamp: int


class CommitStats(BaseModel):
    """Snapshot statistics recorded with a commit.

    Records written by the browser extension name the counts
    ``totalBookmarks``, ``totalFolders`` and ``totalItems``; both spellings
    are read.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    leaf_count: int = Field(
        default=0, validation_alias=AliasChoices("leaf_count", "totalBookmarks")
    )
    container_count: int = Field(
        default=0, validation_alias=AliasChoices("container_count", "totalFolders")
    )
    total_count: int = Field(
        default=0, validation_alias=AliasChoices("total_count", "totalItems")
    )

    @classmethod
    def from_tree_stats(cls, stats: TreeStats) -> CommitStats:
        """Build commit stats from Stat Engine output."""
        return cls(
            leaf_count=stats.leaf_count,
            container_count=stats.container_count,
            total_count=stats.total_count,
        )


class Commit(BaseModel):
    """An immutable commit record.

    Attributes:
        hash: Unique identifier.
        message: Free-text description of the change.
        author: Who made the change.
        committer: Who recorded the change; its timestamp orders history.
        parent: Hash of the previous commit, or None for the first commit.
        origin: Label of what triggered the commit (system, user, manual).
        stats: Statistics of the attached snapshot.
        data: The full raw snapshot.

    Fields this model does not know, such as an imported record's
    ``tree``, are kept.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="allow")

    hash: str
    message: str
    author: Signature
    committer: Signature
    parent: str | None = None
    origin: str = "user"
    stats: CommitStats = Field(default_factory=CommitStats)
    data: list[Any] = Field(default_factory=list)

    @property
    def short_hash(self) -> str:
        """First 8 characters of the hash."""
        return self.hash[:8]

    def snapshot(self) -> Snapshot:
        """Parse the attached raw snapshot."""
        return Snapshot.from_raw(self.data)


class RepositoryRecord(BaseModel):
    """Process-wide repository metadata.

    Attributes:
        initialized: Always True for a stored record.
        created: Creation time in epoch milliseconds.
        head: Hash of the most recent commit, or None before the first commit.
        branches: Branch name to commit hash.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="allow")

    initialized: bool = True
    created: int = Field(default_factory=now_ms)
    head: str | None = None
    branches: dict[str, str | None] = Field(
        default_factory=lambda: {DEFAULT_BRANCH: None}
    )


class UserIdentity(BaseModel):
    """Identity written into commit signatures."""

    name: str = DEFAULT_AUTHOR_NAME
    email: str = DEFAULT_AUTHOR_EMAIL


class GitConfig(BaseModel):
    """Persisted configuration read at commit-creation time."""

    user: UserIdentity = Field(default_factory=UserIdentity)


class ExportBundle(BaseModel):
    """Self-contained export of the whole repository.

    Serialized with camelCase keys:
    ``{repository, commits, currentBranch, config, exportDate, version}``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    repository: RepositoryRecord
    commits: dict[str, Commit]
    current_branch: str = Field(default=DEFAULT_BRANCH, alias="currentBranch")
    config: GitConfig = Field(default_factory=GitConfig)
    export_date: str = Field(default="", alias="exportDate")
    version: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True, slots=True)
class CommitSummary:
    """A history entry as returned by ``get_commit_history``.

    Attributes:
        hash: Full commit hash.
        short_hash: First 8 characters of the hash.
        message: Commit message.
        author: Author signature.
        committer: Committer signature.
        parent: Parent hash, or None for the first commit.
        origin: Label of what triggered the commit.
        stats: Snapshot statistics.
        date: Committer timestamp as an ISO 8601 UTC string.
    """

    hash: str
    short_hash: str
    message: str
    author: Signature
    committer: Signature
    parent: str | None
    origin: str
    stats: CommitStats
    date: str

    @classmethod
    def from_commit(cls, commit: Commit) -> CommitSummary:
        """Summarize a commit, dropping its snapshot."""
        return cls(
            hash=commit.hash,
            short_hash=commit.short_hash,
            message=commit.message,
            author=commit.author,
            committer=commit.committer,
            parent=commit.parent,
            origin=commit.origin,
            stats=commit.stats,
            date=ms_to_iso(commit.committer.timestamp),
        )


@dataclass(frozen=True, slots=True)
class RepositoryStats:
    """Repository-wide statistics.

    Attributes:
        initialized: Whether a repository record exists.
        total_commits: Number of commits in the commit table.
        branch_count: Number of branch pointers.
        current_branch: Name of the active branch.
        head_commit: Hash of the head commit, if any.
        created: Repository creation time in epoch milliseconds, if any.
        last_commit_timestamp: Committer timestamp of the head commit, if any.
    """

    initialized: bool
    total_commits: int
    branch_count: int
    current_branch: str
    head_commit: str | None
    created: int | None
    last_commit_timestamp: int | None

"""bmgit commit store.

This package owns the append-only, hash-addressed history of bookmark
snapshots.

Classes:
    CommitStore: Create, read, traverse, reset, export and import history.
    CommitHasher: Content-and-time derived commit hash generator.

Models:
    Commit: Immutable commit record.
    CommitSummary: History entry with a short hash and ISO date.
    CommitStats: Snapshot statistics stored with a commit.
    Signature: Author/committer identity and timestamp.
    RepositoryRecord: Head pointer, branch table and creation time.
    RepositoryStats: Repository-wide statistics.
    GitConfig: Persisted identity used for new commits.
    ExportBundle: Self-contained export of the whole repository.

Example:
    >>> from bmgit.repository import CommitStore
    >>> from bmgit.storage import MemoryStore
    >>> store = CommitStore(MemoryStore())
    >>> await store.initialize()
    >>> await store.has_commits()
    False
"""

from bmgit.repository._bundle import REQUIRED_FIELDS, validate_bundle
from bmgit.repository._hashing import CommitHasher
from bmgit.repository._models import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    DEFAULT_BRANCH,
    EXPORT_FORMAT_VERSION,
    Commit,
    CommitStats,
    CommitSummary,
    ExportBundle,
    GitConfig,
    RepositoryRecord,
    RepositoryStats,
    Signature,
    UserIdentity,
    ms_to_iso,
    now_ms,
)
from bmgit.repository._store import CommitStore

__all__ = [
    "DEFAULT_AUTHOR_EMAIL",
    "DEFAULT_AUTHOR_NAME",
    "DEFAULT_BRANCH",
    "EXPORT_FORMAT_VERSION",
    "REQUIRED_FIELDS",
    "Commit",
    "CommitHasher",
    "CommitStats",
    "CommitStore",
    "CommitSummary",
    "ExportBundle",
    "GitConfig",
    "RepositoryRecord",
    "RepositoryStats",
    "Signature",
    "UserIdentity",
    "ms_to_iso",
    "now_ms",
    "validate_bundle",
]

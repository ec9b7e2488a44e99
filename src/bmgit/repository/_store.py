# pyright: reportAny=false, reportExplicitAny=false
"""Commit store: repository metadata, commit table and history traversal.

The store is the only owner of the repository record and the commit table.
Every mutation (initialize, commit, reset, import) runs under one lock, reads
the current state, and writes all affected slots with a single ``set`` call,
so the head and the commit table are persisted together.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, final

import anyio
import pendulum
from pydantic import ValidationError

from bmgit.exceptions import (
    CommitNotFoundError,
    RepositoryError,
    RepositoryNotInitializedError,
    StorageError,
)
from bmgit.repository._bundle import validate_bundle
from bmgit.repository._hashing import CommitHasher
from bmgit.repository._models import (
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
)
from bmgit.storage import StorageKey
from bmgit.tree import DiffResult, Snapshot, compute_stats, diff_snapshots

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from bmgit.storage import KeyValueStore

_ALL_SLOTS: Final = (
    StorageKey.REPOSITORY,
    StorageKey.COMMITS,
    StorageKey.CURRENT_BRANCH,
    StorageKey.GIT_CONFIG,
)


def _parse_repository(raw: object) -> RepositoryRecord | None:
    if not raw:
        return None
    try:
        return RepositoryRecord.model_validate(raw)
    except ValidationError as e:
        msg = f"Stored repository record is malformed: {e}"
        raise RepositoryError(msg) from e


def _parse_git_config(raw: object, default: GitConfig) -> GitConfig:
    if not raw:
        return default
    try:
        return GitConfig.model_validate(raw)
    except ValidationError:
        return default


@final
class CommitStore:
    """Owns the bookmark commit history.

    Mutating operations are serialized through an ``anyio.Lock`` so that
    concurrent callers (for example a manual snapshot racing a coalesced
    commit) each see the head left by the previous one.

    Example:
        >>> store = CommitStore(MemoryStore())
        >>> await store.initialize()
        >>> commit_hash = await store.create_commit(snapshot, "Initial snapshot")
        >>> [entry.short_hash for entry in await store.get_commit_history()]
    """

    __slots__ = ("_default_config", "_hasher", "_lock", "_logger", "_storage")

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        default_config: GitConfig | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the commit store.

        Args:
            storage: The key-value persistence backend.
            default_config: Git configuration written when none is persisted.
            logger: Optional structured logger.
        """
        self._storage = storage
        self._default_config = default_config or GitConfig()
        self._hasher = CommitHasher()
        self._lock = anyio.Lock()
        self._logger = logger

    @property
    def storage(self) -> KeyValueStore:
        """The underlying persistence backend."""
        return self._storage

    def _fresh_items(self, *, include_config: bool) -> dict[str, Any]:
        items: dict[str, Any] = {
            StorageKey.REPOSITORY: RepositoryRecord().model_dump(mode="json"),
            StorageKey.COMMITS: {},
            StorageKey.CURRENT_BRANCH: DEFAULT_BRANCH,
        }
        if include_config:
            items[StorageKey.GIT_CONFIG] = self._default_config.model_dump(mode="json")
        return items

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Create an empty repository unless one already exists.

        Safe to call on every start: an existing repository, its commits and
        its git configuration are left untouched.

        Raises:
            StorageError: If persistence fails.
        """
        async with self._lock:
            existing = await self._storage.get(
                [StorageKey.REPOSITORY, StorageKey.GIT_CONFIG]
            )
            if existing.get(StorageKey.REPOSITORY):
                if self._logger:
                    self._logger.debug("repository_exists")
                return

            items = self._fresh_items(
                include_config=StorageKey.GIT_CONFIG not in existing
            )
            await self._storage.set(items)

        if self._logger:
            self._logger.info("repository_created", branch=DEFAULT_BRANCH)

    async def has_commits(self) -> bool:
        """Check whether the commit table holds at least one commit."""
        state = await self._storage.get([StorageKey.COMMITS])
        return bool(state.get(StorageKey.COMMITS))

    # =========================================================================
    # Commit creation
    # =========================================================================

    async def create_commit(
        self,
        snapshot: Snapshot | list[Any],
        message: str,
        author: str = "user",
    ) -> str:
        """Record a snapshot as a new commit on the current branch.

        The new commit's parent is the current head. The commit table, the
        head and the branch pointer are written in one operation.

        Args:
            snapshot: The tree snapshot (typed or raw) to store.
            message: Commit message.
            author: Label of what triggered the commit.

        Returns:
            The hash of the new commit.

        Raises:
            RepositoryNotInitializedError: If no repository exists.
            RepositoryError: If the stored repository record is malformed.
            SnapshotEncodingError: If the snapshot cannot be serialized.
            StorageError: If persistence fails. Nothing is changed.
        """
        if not isinstance(snapshot, Snapshot):
            snapshot = Snapshot.from_raw(snapshot)
        data = snapshot.to_raw()
        stats = CommitStats.from_tree_stats(compute_stats(snapshot))

        async with self._lock:
            state = await self._storage.get(_ALL_SLOTS)
            repository = _parse_repository(state.get(StorageKey.REPOSITORY))
            if repository is None:
                msg = "Repository is not initialized"
                raise RepositoryNotInitializedError(msg)

            commits: dict[str, Any] = state.get(StorageKey.COMMITS) or {}
            branch: str = state.get(StorageKey.CURRENT_BRANCH) or DEFAULT_BRANCH
            config = _parse_git_config(
                state.get(StorageKey.GIT_CONFIG), self._default_config
            )

            commit_hash, timestamp = self._hasher.generate(message, data)
            while commit_hash in commits:
                commit_hash, timestamp = self._hasher.generate(message, data)

            signature = Signature(
                name=config.user.name,
                email=config.user.email,
                timestamp=timestamp,
            )
            commit = Commit(
                hash=commit_hash,
                message=message,
                author=signature,
                committer=signature,
                parent=repository.head,
                origin=author,
                stats=stats,
                data=data,
            )

            commits[commit_hash] = commit.model_dump(mode="json")
            updated = repository.model_copy(
                update={
                    "head": commit_hash,
                    "branches": {**repository.branches, branch: commit_hash},
                }
            )
            await self._storage.set(
                {
                    StorageKey.REPOSITORY: updated.model_dump(mode="json"),
                    StorageKey.COMMITS: commits,
                }
            )

        if self._logger:
            self._logger.info(
                "commit_created",
                commit=commit_hash,
                parent=commit.parent,
                branch=branch,
                message=message,
                origin=author,
                leaf_count=stats.leaf_count,
                container_count=stats.container_count,
            )
        return commit_hash

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_commit_history(self, limit: int | None = 50) -> list[CommitSummary]:
        """Walk the commit chain from the head.

        Traversal stops after ``limit`` entries, at the root commit, or at a
        parent hash that does not resolve (a broken chain ends history
        without error).

        Args:
            limit: Maximum number of entries; None walks the whole chain.

        Returns:
            Summaries ordered from newest to oldest.
        """
        state = await self._storage.get([StorageKey.REPOSITORY, StorageKey.COMMITS])
        repository = _parse_repository(state.get(StorageKey.REPOSITORY))
        if repository is None or repository.head is None:
            return []

        commits: dict[str, Any] = state.get(StorageKey.COMMITS) or {}
        history: list[CommitSummary] = []
        seen: set[str] = set()
        current: str | None = repository.head

        while current is not None and (limit is None or len(history) < limit):
            raw = commits.get(current)
            if raw is None or current in seen:
                break
            try:
                commit = Commit.model_validate(raw)
            except ValidationError:
                if self._logger:
                    self._logger.warning("history_commit_malformed", commit=current)
                break

            history.append(CommitSummary.from_commit(commit))
            seen.add(current)
            current = commit.parent

        return history

    async def get_commit(self, commit_hash: str) -> Commit | None:
        """Look up a full commit record by hash.

        Returns:
            The commit, or None if the hash is unknown or the record is malformed.
        """
        state = await self._storage.get([StorageKey.COMMITS])
        raw = (state.get(StorageKey.COMMITS) or {}).get(commit_hash)
        if raw is None:
            return None
        try:
            return Commit.model_validate(raw)
        except ValidationError:
            if self._logger:
                self._logger.warning("commit_malformed", commit=commit_hash)
            return None

    async def resolve_hash(self, prefix: str) -> str:
        """Expand a full or abbreviated commit hash.

        Raises:
            CommitNotFoundError: If no commit, or more than one, matches.
        """
        state = await self._storage.get([StorageKey.COMMITS])
        commits: dict[str, Any] = state.get(StorageKey.COMMITS) or {}
        if prefix in commits:
            return prefix

        matches = [
            commit_hash for commit_hash in commits if commit_hash.startswith(prefix)
        ]
        if len(matches) == 1:
            return matches[0]

        if matches:
            msg = f"Commit hash '{prefix}' is ambiguous ({len(matches)} matches)"
        else:
            msg = f"Commit not found: {prefix}"
        raise CommitNotFoundError(msg, commit_hash=prefix)

    async def get_commit_data(self, commit_hash: str) -> Snapshot | None:
        """Return the snapshot stored with a commit, or None if absent."""
        commit = await self.get_commit(commit_hash)
        return commit.snapshot() if commit is not None else None

    async def get_commit_diff(self, hash_a: str, hash_b: str) -> DiffResult | None:
        """Diff the snapshots of two commits.

        Returns:
            The coarse size-delta diff going from A to B, or None if either
            commit is missing.
        """
        snapshot_a = await self.get_commit_data(hash_a)
        snapshot_b = await self.get_commit_data(hash_b)
        if snapshot_a is None or snapshot_b is None:
            return None
        return diff_snapshots(snapshot_a, snapshot_b)

    async def get_branches(self) -> dict[str, str | None]:
        """Return the branch table (``{"main": None}`` without a repository)."""
        state = await self._storage.get([StorageKey.REPOSITORY])
        repository = _parse_repository(state.get(StorageKey.REPOSITORY))
        if repository is None:
            return {DEFAULT_BRANCH: None}
        return dict(repository.branches)

    async def get_current_branch(self) -> str:
        """Return the active branch name, defaulting to ``main``."""
        state = await self._storage.get([StorageKey.CURRENT_BRANCH])
        return state.get(StorageKey.CURRENT_BRANCH) or DEFAULT_BRANCH

    async def get_git_config(self) -> GitConfig:
        """Return the persisted git configuration."""
        state = await self._storage.get([StorageKey.GIT_CONFIG])
        return _parse_git_config(state.get(StorageKey.GIT_CONFIG), self._default_config)

    async def get_repository_stats(self) -> RepositoryStats:
        """Summarize the repository."""
        state = await self._storage.get(_ALL_SLOTS)
        repository = _parse_repository(state.get(StorageKey.REPOSITORY))
        commits: dict[str, Any] = state.get(StorageKey.COMMITS) or {}
        branch: str = state.get(StorageKey.CURRENT_BRANCH) or DEFAULT_BRANCH

        last_commit_timestamp: int | None = None
        if repository is not None and repository.head is not None:
            head = commits.get(repository.head) or {}
            committer = head.get("committer") or {}
            last_commit_timestamp = committer.get("timestamp")

        return RepositoryStats(
            initialized=repository is not None,
            total_commits=len(commits),
            branch_count=len(repository.branches) if repository is not None else 0,
            current_branch=branch,
            head_commit=repository.head if repository is not None else None,
            created=repository.created if repository is not None else None,
            last_commit_timestamp=last_commit_timestamp,
        )

    # =========================================================================
    # Reset / export / import
    # =========================================================================

    async def reset_repository(self) -> bool:
        """Discard all history and start over with an empty repository.

        The repository record, commit table and branch pointer are replaced
        in a single write, so readers see either the old or the new state.
        The persisted git configuration is kept.

        Returns:
            True on success, False if persistence failed.
        """
        try:
            async with self._lock:
                existing = await self._storage.get([StorageKey.GIT_CONFIG])
                items = self._fresh_items(
                    include_config=StorageKey.GIT_CONFIG not in existing
                )
                await self._storage.set(items)
        except StorageError as e:
            if self._logger:
                self._logger.exception("repository_reset_failed", error=str(e))
            return False

        if self._logger:
            self._logger.info("repository_reset")
        return True

    async def export_repository(self) -> ExportBundle:
        """Serialize the whole repository into one self-contained bundle.

        Raises:
            RepositoryNotInitializedError: If no repository exists.
            RepositoryError: If a stored record is malformed.
            StorageError: If persistence fails.
        """
        state = await self._storage.get(_ALL_SLOTS)
        if not state.get(StorageKey.REPOSITORY):
            msg = "Repository is not initialized"
            raise RepositoryNotInitializedError(msg)

        try:
            bundle = ExportBundle.model_validate(
                {
                    "repository": state[StorageKey.REPOSITORY],
                    "commits": state.get(StorageKey.COMMITS) or {},
                    "currentBranch": state.get(StorageKey.CURRENT_BRANCH)
                    or DEFAULT_BRANCH,
                    "config": state.get(StorageKey.GIT_CONFIG)
                    or self._default_config.model_dump(mode="json"),
                    "exportDate": pendulum.now("UTC").to_iso8601_string(),
                    "version": EXPORT_FORMAT_VERSION,
                }
            )
        except ValidationError as e:
            msg = f"Stored repository cannot be exported: {e}"
            raise RepositoryError(msg) from e

        if self._logger:
            self._logger.info("repository_exported", commits=len(bundle.commits))
        return bundle

    async def import_repository(self, bundle: ExportBundle | Mapping[str, Any]) -> None:
        """Replace the entire persisted state with a bundle's contents.

        Validation runs before anything is written; a rejected bundle leaves
        the current repository intact. A raw bundle's records are then
        stored as given, unknown fields included, and all slots are replaced
        in one write.

        Raises:
            ImportValidationError: If the bundle is rejected.
            StorageError: If persistence fails.
        """
        parsed = validate_bundle(bundle)
        raw = bundle if isinstance(bundle, Mapping) else parsed.to_dict()
        config = raw.get("config")
        if not isinstance(config, Mapping):
            config = parsed.config.model_dump(mode="json")

        async with self._lock:
            await self._storage.set(
                {
                    StorageKey.REPOSITORY: raw["repository"],
                    StorageKey.COMMITS: raw["commits"],
                    StorageKey.CURRENT_BRANCH: parsed.current_branch or DEFAULT_BRANCH,
                    StorageKey.GIT_CONFIG: config,
                }
            )

        if self._logger:
            self._logger.info(
                "repository_imported",
                commits=len(parsed.commits),
                head=parsed.repository.head,
                version=parsed.version,
            )

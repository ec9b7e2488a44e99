import itertools

import anyio
import pytest

from bmgit.exceptions import (
    CommitNotFoundError,
    RepositoryError,
    RepositoryNotInitializedError,
    SnapshotEncodingError,
    StorageError,
)
from bmgit.repository import (
    DEFAULT_AUTHOR_NAME,
    DEFAULT_BRANCH,
    CommitStore,
    GitConfig,
    UserIdentity,
)
from bmgit.storage import MemoryStore, StorageKey
from bmgit.tree import CountDelta, Snapshot
from tests.factories import make_nested, make_tree

pytestmark = pytest.mark.anyio


class TestInitialize:
    async def test_creates_empty_repository(
        self, store: CommitStore, memory_store: MemoryStore
    ) -> None:
        await store.initialize()

        data = memory_store.snapshot()
        assert data[StorageKey.REPOSITORY]["head"] is None
        assert data[StorageKey.REPOSITORY]["branches"] == {DEFAULT_BRANCH: None}
        assert data[StorageKey.COMMITS] == {}
        assert data[StorageKey.CURRENT_BRANCH] == DEFAULT_BRANCH
        assert data[StorageKey.GIT_CONFIG]["user"]["name"] == DEFAULT_AUTHOR_NAME

    async def test_is_idempotent(self, initialized_store: CommitStore) -> None:
        first = await initialized_store.create_commit(make_tree(2), "first")

        await initialized_store.initialize()

        history = await initialized_store.get_commit_history()
        assert [entry.hash for entry in history] == [first]

    async def test_keeps_existing_git_config(self) -> None:
        custom = GitConfig(user=UserIdentity(name="Ada", email="ada@example.com"))
        memory = MemoryStore({StorageKey.GIT_CONFIG: custom.model_dump(mode="json")})
        store = CommitStore(memory)

        await store.initialize()

        assert (await store.get_git_config()).user.name == "Ada"

    async def test_uses_default_config(self, memory_store: MemoryStore) -> None:
        config = GitConfig(user=UserIdentity(name="Grace", email="g@example.com"))
        store = CommitStore(memory_store, default_config=config)
        await store.initialize()

        commit_hash = await store.create_commit(make_tree(1), "msg")

        commit = await store.get_commit(commit_hash)
        assert commit is not None
        assert commit.author.name == "Grace"
        assert commit.committer.email == "g@example.com"


class TestCreateCommit:
    async def test_requires_initialized_repository(self, store: CommitStore) -> None:
        with pytest.raises(RepositoryNotInitializedError):
            await store.create_commit(make_tree(1), "msg")

    async def test_first_commit_has_no_parent(
        self, initialized_store: CommitStore
    ) -> None:
        commit_hash = await initialized_store.create_commit(make_tree(3), "first")

        commit = await initialized_store.get_commit(commit_hash)
        assert commit is not None
        assert commit.parent is None
        assert commit.message == "first"
        assert commit.origin == "user"
        assert commit.stats.leaf_count == 3
        assert commit.stats.container_count == 1
        assert commit.stats.total_count == 4
        assert commit.author == commit.committer

    async def test_advances_head_and_branch(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        first = await initialized_store.create_commit(make_tree(1), "one")
        second = await initialized_store.create_commit(make_tree(2), "two", "manual")

        repository = memory_store.snapshot()[StorageKey.REPOSITORY]
        assert repository["head"] == second
        assert repository["branches"][DEFAULT_BRANCH] == second

        commit = await initialized_store.get_commit(second)
        assert commit is not None
        assert commit.parent == first
        assert commit.origin == "manual"

    async def test_hashes_are_unique(self, initialized_store: CommitStore) -> None:
        tree = make_tree(1)
        hashes = [
            await initialized_store.create_commit(tree, "same") for _ in range(20)
        ]

        assert len(set(hashes)) == 20

    async def test_stores_snapshot_data(self, initialized_store: CommitStore) -> None:
        snapshot = Snapshot.from_raw(make_tree(2))

        commit_hash = await initialized_store.create_commit(snapshot, "m")

        assert await initialized_store.get_commit_data(commit_hash) == snapshot

    async def test_failed_write_changes_nothing(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        first = await initialized_store.create_commit(make_tree(1), "one")
        before = memory_store.snapshot()
        memory_store.fail_next_set()

        with pytest.raises(StorageError):
            await initialized_store.create_commit(make_tree(2), "two")

        assert memory_store.snapshot() == before
        history = await initialized_store.get_commit_history()
        assert [entry.hash for entry in history] == [first]

    async def test_too_deeply_nested_snapshot_changes_nothing(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        before = memory_store.snapshot()

        with pytest.raises(SnapshotEncodingError):
            await initialized_store.create_commit(make_nested(200), "deep")

        assert memory_store.snapshot() == before
        assert await initialized_store.has_commits() is False

    async def test_concurrent_commits_form_one_chain(
        self, initialized_store: CommitStore
    ) -> None:
        count = 10

        async with anyio.create_task_group() as tg:
            for i in range(count):
                tg.start_soon(
                    initialized_store.create_commit, make_tree(i), f"commit {i}"
                )

        history = await initialized_store.get_commit_history(limit=None)
        assert len(history) == count
        assert {entry.message for entry in history} == {
            f"commit {i}" for i in range(count)
        }
        for newer, older in itertools.pairwise(history):
            assert newer.parent == older.hash
        assert history[-1].parent is None
        stats = await initialized_store.get_repository_stats()
        assert stats.total_commits == count
        assert stats.head_commit == history[0].hash

    async def test_malformed_repository_record(self) -> None:
        store = CommitStore(MemoryStore({StorageKey.REPOSITORY: {"created": "soon"}}))

        with pytest.raises(RepositoryError):
            await store.create_commit(make_tree(1), "msg")


class TestCommitHistory:
    async def test_empty_repository(self, initialized_store: CommitStore) -> None:
        assert await initialized_store.get_commit_history() == []

    async def test_uninitialized_repository(self, store: CommitStore) -> None:
        assert await store.get_commit_history() == []

    async def test_newest_first(self, initialized_store: CommitStore) -> None:
        hashes = [
            await initialized_store.create_commit(make_tree(i), f"commit {i}")
            for i in range(4)
        ]

        history = await initialized_store.get_commit_history()

        assert [entry.hash for entry in history] == list(reversed(hashes))
        assert history[0].short_hash == hashes[-1][:8]
        assert history[-1].parent is None

    async def test_respects_limit(self, initialized_store: CommitStore) -> None:
        for i in range(5):
            await initialized_store.create_commit(make_tree(i), f"commit {i}")

        assert len(await initialized_store.get_commit_history(limit=2)) == 2
        assert len(await initialized_store.get_commit_history(limit=None)) == 5

    async def test_broken_chain_ends_history(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        first = await initialized_store.create_commit(make_tree(1), "one")
        second = await initialized_store.create_commit(make_tree(2), "two")
        data = memory_store.snapshot()
        del data[StorageKey.COMMITS][first]
        await memory_store.set({StorageKey.COMMITS: data[StorageKey.COMMITS]})

        history = await initialized_store.get_commit_history()

        assert [entry.hash for entry in history] == [second]

    async def test_read_failure_propagates(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        memory_store.fail_next_get()

        with pytest.raises(StorageError):
            await initialized_store.get_commit_history()


class TestLookups:
    async def test_get_commit_unknown_hash(
        self, initialized_store: CommitStore
    ) -> None:
        assert await initialized_store.get_commit("deadbeef") is None
        assert await initialized_store.get_commit_data("deadbeef") is None

    async def test_resolve_hash_prefix(self, initialized_store: CommitStore) -> None:
        commit_hash = await initialized_store.create_commit(make_tree(1), "one")

        assert await initialized_store.resolve_hash(commit_hash) == commit_hash
        assert await initialized_store.resolve_hash(commit_hash[:8]) == commit_hash

    async def test_resolve_hash_unknown(self, initialized_store: CommitStore) -> None:
        with pytest.raises(CommitNotFoundError, match="Commit not found"):
            await initialized_store.resolve_hash("zzzz")

    async def test_resolve_hash_ambiguous(self, initialized_store: CommitStore) -> None:
        await initialized_store.create_commit(make_tree(1), "one")
        await initialized_store.create_commit(make_tree(2), "two")

        with pytest.raises(CommitNotFoundError, match="ambiguous"):
            await initialized_store.resolve_hash("")

    async def test_commit_diff(self, initialized_store: CommitStore) -> None:
        hash_a = await initialized_store.create_commit(make_tree(3), "a")
        hash_b = await initialized_store.create_commit(make_tree(5), "b")

        result = await initialized_store.get_commit_diff(hash_a, hash_b)

        assert result is not None
        assert result.bookmarks == CountDelta(added=2, removed=0, changed=0)
        assert result.folders == CountDelta()

    async def test_commit_diff_missing_commit(
        self, initialized_store: CommitStore
    ) -> None:
        hash_a = await initialized_store.create_commit(make_tree(3), "a")

        assert await initialized_store.get_commit_diff(hash_a, "missing") is None

    async def test_branches_and_current_branch(
        self, initialized_store: CommitStore
    ) -> None:
        commit_hash = await initialized_store.create_commit(make_tree(1), "a")

        assert await initialized_store.get_branches() == {DEFAULT_BRANCH: commit_hash}
        assert await initialized_store.get_current_branch() == DEFAULT_BRANCH

    async def test_branches_without_repository(self, store: CommitStore) -> None:
        assert await store.get_branches() == {DEFAULT_BRANCH: None}


class TestRepositoryStats:
    async def test_uninitialized(self, store: CommitStore) -> None:
        stats = await store.get_repository_stats()

        assert stats.initialized is False
        assert stats.total_commits == 0
        assert stats.head_commit is None

    async def test_counts_commits(self, initialized_store: CommitStore) -> None:
        await initialized_store.create_commit(make_tree(1), "a")
        head = await initialized_store.create_commit(make_tree(2), "b")

        stats = await initialized_store.get_repository_stats()

        assert stats.initialized is True
        assert stats.total_commits == 2
        assert stats.branch_count == 1
        assert stats.current_branch == DEFAULT_BRANCH
        assert stats.head_commit == head
        assert stats.last_commit_timestamp is not None
        assert stats.created is not None


class TestReset:
    async def test_reset_empties_history(self, initialized_store: CommitStore) -> None:
        await initialized_store.create_commit(make_tree(1), "a")

        assert await initialized_store.reset_repository() is True

        assert await initialized_store.get_commit_history() == []
        stats = await initialized_store.get_repository_stats()
        assert stats.initialized is True
        assert stats.total_commits == 0
        assert stats.head_commit is None

    async def test_reset_keeps_git_config(self) -> None:
        custom = GitConfig(user=UserIdentity(name="Ada", email="ada@example.com"))
        store = CommitStore(MemoryStore())
        await store.import_repository(
            {
                "repository": {"initialized": True, "created": 1, "head": None},
                "commits": {},
                "config": custom.model_dump(mode="json"),
                "version": "1.0.0",
            }
        )

        assert await store.reset_repository() is True

        assert (await store.get_git_config()).user.name == "Ada"

    async def test_reset_failure_returns_false(
        self, initialized_store: CommitStore, memory_store: MemoryStore
    ) -> None:
        commit_hash = await initialized_store.create_commit(make_tree(1), "a")
        memory_store.fail_next_set()

        assert await initialized_store.reset_repository() is False

        history = await initialized_store.get_commit_history()
        assert [entry.hash for entry in history] == [commit_hash]

    async def test_commit_after_reset_has_no_parent(
        self, initialized_store: CommitStore
    ) -> None:
        await initialized_store.create_commit(make_tree(1), "a")
        await initialized_store.reset_repository()

        commit_hash = await initialized_store.create_commit(make_tree(1), "b")

        commit = await initialized_store.get_commit(commit_hash)
        assert commit is not None
        assert commit.parent is None

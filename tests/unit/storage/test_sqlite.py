from pathlib import Path

import pytest

from bmgit.exceptions import StorageError
from bmgit.storage import KeyValueStore, SQLiteStore, StorageKey

pytestmark = pytest.mark.anyio


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "repository.db"


class TestSQLiteStore:
    def test_creates_database_file(self, db_path: Path) -> None:
        db_path.parent.mkdir()

        store = SQLiteStore(db_path)

        assert db_path.exists()
        assert store.db_path == str(db_path)
        assert isinstance(store, KeyValueStore)

    async def test_round_trips_json_values(self, db_path: Path) -> None:
        db_path.parent.mkdir()
        store = SQLiteStore(db_path)
        value = {"head": None, "branches": {"main": "abc"}, "count": 3}

        await store.set(
            {StorageKey.REPOSITORY: value, StorageKey.CURRENT_BRANCH: "main"}
        )

        result = await store.get([StorageKey.REPOSITORY, StorageKey.CURRENT_BRANCH])
        assert result == {"bookmark_git_repo": value, "current_branch": "main"}

    async def test_missing_keys_are_omitted(self, db_path: Path) -> None:
        db_path.parent.mkdir()
        store = SQLiteStore(db_path)

        assert await store.get([StorageKey.COMMITS]) == {}
        assert await store.get([]) == {}

    async def test_set_overwrites(self, db_path: Path) -> None:
        db_path.parent.mkdir()
        store = SQLiteStore(db_path)

        await store.set({"slot": [1]})
        await store.set({"slot": [1, 2]})

        assert await store.get(["slot"]) == {"slot": [1, 2]}

    async def test_remove(self, db_path: Path) -> None:
        db_path.parent.mkdir()
        store = SQLiteStore(db_path)
        await store.set({"a": 1, "b": 2})

        await store.remove(["a"])

        assert await store.get(["a", "b"]) == {"b": 2}

    async def test_data_survives_reopen(self, db_path: Path) -> None:
        db_path.parent.mkdir()
        await SQLiteStore(db_path).set({"slot": "kept"})

        assert await SQLiteStore(db_path).get(["slot"]) == {"slot": "kept"}

    def test_unopenable_path_raises_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(StorageError) as exc_info:
            SQLiteStore(blocker / "nested" / "repository.db")

        assert exc_info.value.operation == "open"

    @pytest.mark.parametrize("path", [":memory:", ""])
    def test_transient_database_is_rejected(self, path: str) -> None:
        with pytest.raises(StorageError, match="needs a database file") as exc_info:
            SQLiteStore(path)

        assert exc_info.value.operation == "open"

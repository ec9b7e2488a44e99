"""Shared test fixtures for bmgit tests."""

import pytest
from rich.console import Console

from bmgit.repository import CommitStore
from bmgit.sources import StaticTreeSource
from bmgit.storage import MemoryStore
from bmgit.tracker import ChangeHistoryLog
from tests.factories import make_tree


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(memory_store: MemoryStore) -> CommitStore:
    return CommitStore(memory_store)


@pytest.fixture
async def initialized_store(store: CommitStore) -> CommitStore:
    await store.initialize()
    return store


@pytest.fixture
def source() -> StaticTreeSource:
    return StaticTreeSource(make_tree(3))


@pytest.fixture
def history(memory_store: MemoryStore) -> ChangeHistoryLog:
    return ChangeHistoryLog(memory_store)


@pytest.fixture
def console() -> Console:
    return Console(
        width=100,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )

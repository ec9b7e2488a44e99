"""Key-value persistence for bmgit.

Classes:
    KeyValueStore: Runtime-checkable protocol for persistence backends.
    StorageKey: Names of the persisted slots.
    MemoryStore: In-memory backend for tests and embedding.
    SQLiteStore: SQLite-backed backend.

Example:
    >>> from bmgit.storage import SQLiteStore, StorageKey
    >>> store = SQLiteStore("repository.db")
    >>> await store.set({StorageKey.CURRENT_BRANCH: "main"})
"""

from bmgit.storage._memory import MemoryStore
from bmgit.storage._protocol import KeyValueStore, StorageKey
from bmgit.storage._sqlite import SQLiteStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "StorageKey",
]

# pyright: reportAny=false, reportExplicitAny=false
"""SQLite-backed key-value store.

Each slot is one row holding an orjson-encoded value. Every ``set`` call
runs in a single transaction, so multi-slot writes (repository head plus
commit table) land together or not at all. Blocking SQLite calls run in a
worker thread.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

import anyio.to_thread
import orjson
import pendulum
from pydantic import BaseModel

from bmgit.exceptions import StorageError
from bmgit.storage._database import (
    ensure_schema,
    quote_name,
    select_rows,
    transaction,
    upsert_rows,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

_TABLE_NAME = "kv_store"
_TABLE = quote_name(_TABLE_NAME)
_KEY_COL = quote_name("key")

# Each operation opens its own connection, so a private database would vanish
# between calls
_TRANSIENT_PATHS = frozenset({"", ":memory:"})

_SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SlotRow(BaseModel):
    """A persisted slot.

    Attributes:
        key: Slot name.
        value: orjson-encoded slot value.
        updated_at: When the slot was last written (ISO 8601 string).
    """

    key: str
    value: bytes
    updated_at: str


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class SQLiteStore:
    """SQLite-backed implementation of KeyValueStore.

    Persists slots to an SQLite database file. Safe for single-process
    access from one event loop.
    """

    _db_path: str
    _logger: FilteringBoundLogger | None

    def __init__(
        self,
        db_path: str | Path,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize an SQLite key-value store.

        Creates the database file and schema if they don't exist.

        Args:
            db_path: Path to the SQLite database file. In-memory and
                temporary databases are rejected; use MemoryStore instead.
            logger: Optional logger for debug-level operation logging.

        Raises:
            StorageError: If the path names no database file or the database
                cannot be created.
        """
        self._db_path = str(db_path)
        self._logger = logger
        if self._db_path in _TRANSIENT_PATHS:
            msg = f"SQLiteStore needs a database file, got {self._db_path!r}"
            raise StorageError(msg, operation="open")
        try:
            ensure_schema(self._db_path, _SQLITE_SCHEMA)
        except (sqlite3.Error, OSError) as e:
            msg = f"Failed to open database {self._db_path}: {e}"
            raise StorageError(msg, operation="open", cause=e) from e

    @property
    def db_path(self) -> str:
        """Path to the database file."""
        return self._db_path

    def _get_sync(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}
        sql = (
            f"SELECT * FROM {_TABLE} WHERE {_KEY_COL} IN ({_placeholders(len(keys))})"  # noqa: S608
        )
        with transaction(self._db_path) as conn:
            rows = select_rows(conn, SlotRow, sql, keys)
        return {row.key: orjson.loads(row.value) for row in rows}

    def _set_sync(self, items: dict[str, bytes]) -> None:
        now_str = pendulum.now("UTC").to_iso8601_string()
        rows = [
            SlotRow(key=key, value=value, updated_at=now_str)
            for key, value in items.items()
        ]
        with transaction(self._db_path) as conn:
            upsert_rows(conn, _TABLE_NAME, rows, key="key")

    def _remove_sync(self, keys: list[str]) -> None:
        if not keys:
            return
        sql = f"DELETE FROM {_TABLE} WHERE {_KEY_COL} IN ({_placeholders(len(keys))})"  # noqa: S608
        with transaction(self._db_path) as conn:
            _ = conn.execute(sql, tuple(keys))

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        """Read the given slots."""
        wanted = [str(key) for key in keys]
        try:
            result = await anyio.to_thread.run_sync(self._get_sync, wanted)
        except (sqlite3.Error, orjson.JSONDecodeError) as e:
            msg = f"Failed to read slots {wanted}: {e}"
            raise StorageError(msg, operation="get", keys=wanted, cause=e) from e

        if self._logger:
            self._logger.debug("store_get", keys=wanted, found=sorted(result))
        return result

    async def set(self, items: Mapping[str, Any]) -> None:
        """Write several slots in one transaction."""
        keys = [str(key) for key in items]
        try:
            encoded = {str(key): orjson.dumps(value) for key, value in items.items()}
        except TypeError as e:
            msg = f"Failed to encode slots {keys}: {e}"
            raise StorageError(msg, operation="set", keys=keys, cause=e) from e

        try:
            await anyio.to_thread.run_sync(self._set_sync, encoded)
        except sqlite3.Error as e:
            msg = f"Failed to write slots {keys}: {e}"
            raise StorageError(msg, operation="set", keys=keys, cause=e) from e

        if self._logger:
            self._logger.debug("store_set", keys=sorted(keys))

    async def remove(self, keys: Iterable[str]) -> None:
        """Delete the given slots."""
        wanted = [str(key) for key in keys]
        try:
            await anyio.to_thread.run_sync(self._remove_sync, wanted)
        except sqlite3.Error as e:
            msg = f"Failed to delete slots {wanted}: {e}"
            raise StorageError(msg, operation="remove", keys=wanted, cause=e) from e

        if self._logger:
            self._logger.debug("store_remove", keys=wanted)

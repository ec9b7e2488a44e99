"""Low-level SQLite access for the slot table.

Every function here is synchronous; callers move them to a worker thread.
Row values are Pydantic models so that what goes in and what comes out of
the table is validated in one place.
"""

from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

type Param = str | int | float | bytes | None


def quote_name(name: str) -> str:
    """Quote a table or column name for interpolation into SQL.

    Raises:
        ValueError: If the name is not a plain identifier.
    """
    if _NAME_RE.match(name) is None:
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return f'"{name}"'


@contextmanager
def transaction(
    path: str | Path, *, timeout: float = 30.0
) -> Iterator[sqlite3.Connection]:
    """Open a connection and run the block as one immediate transaction.

    The transaction commits when the block exits normally and rolls back on
    any exception. The connection is closed either way.

    Args:
        path: Database file.
        timeout: Seconds to wait on a locked database.

    Yields:
        A connection whose rows are ``sqlite3.Row`` objects.
    """
    conn = sqlite3.connect(str(path), timeout=timeout, isolation_level="IMMEDIATE")
    conn.row_factory = sqlite3.Row
    # WAL is unavailable on some filesystems; the default journal still works
    with suppress(sqlite3.OperationalError):
        _ = conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
        conn.commit()
    except BaseException:
        with suppress(sqlite3.Error):
            conn.rollback()
        raise
    finally:
        conn.close()


def ensure_schema(path: str | Path, schema: str) -> None:
    """Create the database file, its parent directories and its tables."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with transaction(path) as conn:
        _ = conn.executescript(schema)


def select_rows[RowT: BaseModel](
    conn: sqlite3.Connection,
    row_model: type[RowT],
    sql: str,
    params: Sequence[Param] = (),
) -> list[RowT]:
    """Run a query and validate each row into ``row_model``."""
    rows = cast("list[sqlite3.Row]", conn.execute(sql, tuple(params)).fetchall())
    return [row_model.model_validate(dict(row)) for row in rows]


def upsert_rows(
    conn: sqlite3.Connection,
    table: str,
    rows: Sequence[BaseModel],
    *,
    key: str,
) -> None:
    """Insert rows, overwriting every other column of rows whose key exists.

    All rows must be instances of the same model. Nothing is committed here;
    the enclosing ``transaction`` block decides.
    """
    if not rows:
        return

    columns = list(type(rows[0]).model_fields)
    names = ", ".join(quote_name(column) for column in columns)
    values = ", ".join(f":{column}" for column in columns)
    assignments = ", ".join(
        f"{quote_name(column)} = excluded.{quote_name(column)}"
        for column in columns
        if column != key
    )
    sql = (
        f"INSERT INTO {quote_name(table)} ({names}) VALUES ({values}) "  # noqa: S608
        f"ON CONFLICT ({quote_name(key)}) DO UPDATE SET {assignments}"
    )
    _ = conn.executemany(sql, [row.model_dump() for row in rows])

# pyright: reportAny=false
"""JSON file helpers built on orjson."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import orjson

from bmgit.exceptions import FileIOError


def read_json(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a JSON object from a file.

    Raises:
        FileIOError: If the file cannot be read, is not valid JSON, or does
            not hold an object.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        msg = f"Failed to read file: {e}"
        raise FileIOError(msg, path=path, operation="read", cause=e) from e

    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise FileIOError(msg, path=path, operation="parse", cause=e) from e

    if not isinstance(data, dict):
        msg = f"Expected JSON object, got {type(data).__name__}"
        raise FileIOError(msg, path=path, operation="parse")

    return data


def write_json_atomic(
    path: Path,
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> None:
    """Write a dictionary as indented JSON, atomically.

    The content goes to a temporary file next to ``path`` which then
    replaces the target, so readers see either the old or the new file.

    Raises:
        FileIOError: If serialization or the write fails.
    """
    try:
        content = orjson.dumps(data, option=orjson.OPT_INDENT_2)
    except TypeError as e:
        msg = f"Failed to serialize JSON: {e}"
        raise FileIOError(msg, path=path, operation="write", cause=e) from e

    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb", dir=path.parent, delete=False, suffix=".tmp"
        ) as f:
            _ = f.write(content)
            temp_path = Path(f.name)
        _ = temp_path.replace(path)
    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        msg = f"Failed to write file: {e}"
        raise FileIOError(msg, path=path, operation="write", cause=e) from e

from pathlib import Path

import pytest

from bmgit.exceptions import FileIOError
from bmgit.utils import read_json, write_json_atomic


class TestReadJson:
    def test_reads_object(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text('{"a": [1, 2]}')

        assert read_json(path) == {"a": [1, 2]}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileIOError) as exc_info:
            read_json(tmp_path / "missing.json")

        assert exc_info.value.operation == "read"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{")

        with pytest.raises(FileIOError) as exc_info:
            read_json(path)

        assert exc_info.value.operation == "parse"

    def test_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("[1, 2]")

        with pytest.raises(FileIOError, match="Expected JSON object"):
            read_json(path)


class TestWriteJsonAtomic:
    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "bundle.json"

        write_json_atomic(path, {"version": "1.0.0"})

        assert read_json(path) == {"version": "1.0.0"}
        assert list(path.parent.iterdir()) == [path]

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bundle.json"
        write_json_atomic(path, {"v": 1})

        write_json_atomic(path, {"v": 2})

        assert read_json(path) == {"v": 2}

    def test_unserializable_data(self, tmp_path: Path) -> None:
        path = tmp_path / "bundle.json"

        with pytest.raises(FileIOError) as exc_info:
            write_json_atomic(path, {"bad": object()})

        assert exc_info.value.operation == "write"
        assert not path.exists()

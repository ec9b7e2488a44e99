import logging
from pathlib import Path

import orjson
import pytest

from bmgit.utils import create_cli_logger, create_logger, get_log_level


class TestGetLogLevel:
    def test_defaults_to_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)
        monkeypatch.delenv("BMGIT_LOG_LEVEL", raising=False)

        assert get_log_level() == logging.INFO

    def test_explicit_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)

        assert get_log_level("warning") == logging.WARNING

    def test_environment_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)
        monkeypatch.setenv("BMGIT_LOG_LEVEL", "error")

        assert get_log_level() == logging.ERROR

    def test_debug_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BMGIT_DEBUG", "1")

        assert get_log_level("error") == logging.DEBUG

    def test_unknown_level_falls_back_to_info(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)

        assert get_log_level("chatty") == logging.INFO


class TestCreateLogger:
    def test_writes_json_lines(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)
        log_file = tmp_path / "logs" / "bmgit.log"
        logger = create_logger(log_file, log_level=logging.INFO)

        logger.info("commit_created", commit="abc")
        logger.debug("filtered_out")

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        entry = orjson.loads(lines[0])
        assert entry["event"] == "commit_created"
        assert entry["commit"] == "abc"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_text_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "bmgit.log"
        logger = create_logger(log_file, log_level=logging.INFO, log_format="text")

        logger.warning("repository_reset")

        assert "repository_reset" in log_file.read_text()

    def test_rotating_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "bmgit.log"
        logger = create_logger(
            log_file, log_level=logging.INFO, max_bytes=200, backup_count=2
        )

        for i in range(20):
            logger.info("event", index=i)

        assert log_file.exists()
        assert (tmp_path / "bmgit.log.1").exists()


class TestCreateCliLogger:
    def test_binds_command(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("BMGIT_DEBUG", raising=False)
        log_file = tmp_path / "cli.log"
        logger = create_cli_logger(level="info", log_file=str(log_file), command="log")

        logger.info("cli_started")

        entry = orjson.loads(log_file.read_text().splitlines()[0])
        assert entry["command"] == "log"

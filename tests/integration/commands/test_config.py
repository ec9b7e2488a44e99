from collections.abc import Callable

import orjson
import pytest

from bmgit.cli._shared import ExitCode
from tests.integration.commands.conftest import CliEnv


class TestConfigGet:
    def test_default_value(
        self, bmgit_cli: Callable[..., int], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert bmgit_cli("config", "get", "tracker.commit_delay") == 0

        assert capsys.readouterr().out.strip() == "1.0"

    def test_bool_as_text(
        self, bmgit_cli: Callable[..., int], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert bmgit_cli("config", "get", "tracker.auto_commit") == 0

        assert capsys.readouterr().out.strip() == "true"

    def test_section_as_json(
        self,
        bmgit_cli: Callable[..., int],
        cli_env: CliEnv,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert bmgit_cli("config", "get", "logging", "--format", "json") == 0

        section = orjson.loads(capsys.readouterr().out)
        assert section["file"] == cli_env.log_file.as_posix()

    def test_unknown_key(self, bmgit_cli: Callable[..., int]) -> None:
        assert bmgit_cli("config", "get", "tracker.colour") == ExitCode.NOT_FOUND


class TestConfigShow:
    def test_json_without_defaults(
        self,
        bmgit_cli: Callable[..., int],
        cli_env: CliEnv,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert bmgit_cli("config", "show", "--format", "json", "--no-defaults") == 0

        data = orjson.loads(capsys.readouterr().out)
        assert data == {"logging": {"file": cli_env.log_file.as_posix()}}

    def test_toml(
        self, bmgit_cli: Callable[..., int], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert bmgit_cli("config", "show") == 0

        out = capsys.readouterr().out
        assert "[tracker]" in out
        assert "commit_delay = 1.0" in out


class TestLogging:
    def test_commands_write_to_configured_log(
        self, bmgit_cli: Callable[..., int], cli_env: CliEnv
    ) -> None:
        assert bmgit_cli("--verbose", "init") == 0

        entries = [
            orjson.loads(line) for line in cli_env.log_file.read_text().splitlines()
        ]
        assert entries
        assert all(entry["command"] == "init" for entry in entries)

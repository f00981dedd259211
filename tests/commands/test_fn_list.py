"""Tests for the fn group and the list command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronoform.cli import cli

T0 = "2023-07-25T00:00:00Z"


class TestFnCommands:
    def test_rfc3339_parse(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "fn", "rfc3339-parse", "2023-07-25T23:43:16Z"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["unix"] == 1690328596
        assert data["weekday_name"] == "Tuesday"

    def test_unix_parse(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "fn", "unix-parse", "1690328596"])
        assert json.loads(result.stdout)["data"]["rfc3339"] == "2023-07-25T23:43:16Z"

    def test_unix_parse_requires_integer(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["fn", "unix-parse", "soon"]).exit_code == 2

    def test_duration_parse(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "fn", "duration-parse", "1h30m"])
        data = json.loads(result.stdout)["data"]
        assert data["input"] == "1h30m"
        assert data["hours"] == 1.5

    def test_duration_parse_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["fn", "duration-parse", "1d"])
        assert result.exit_code == 1
        assert "MALFORMED_DURATION" in result.stderr

    def test_fn_never_opens_state(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        cli_runner.invoke(cli, ["fn", "duration-parse", "5s"])
        assert not (tmp_path / ".chronoform").exists()


@pytest.mark.usefixtures("_isolated_workspace")
class TestListCommand:
    def _seed(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["--now", T0, "rotating", "apply", "cert", "--rotation-days", "1"])
        cli_runner.invoke(cli, ["--now", T0, "static", "apply", "built"])

    def test_json(self, cli_runner: CliRunner) -> None:
        self._seed(cli_runner)
        result = cli_runner.invoke(cli, ["--json", "--now", "2023-07-27T00:00:00Z", "list"])
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 2
        states = {item["address"]: item["state"] for item in data["items"]}
        assert states == {"built": "active", "cert": "expired"}

    def test_type_filter(self, cli_runner: CliRunner) -> None:
        self._seed(cli_runner)
        result = cli_runner.invoke(cli, ["-q", "list", "--type", "static"])
        assert result.stdout.strip() == "built"

    def test_unknown_type(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["list", "--type", "sleep"]).exit_code == 2

    def test_table(self, cli_runner: CliRunner) -> None:
        self._seed(cli_runner)
        result = cli_runner.invoke(cli, ["list"])
        assert "2 resources" in result.stdout

"""Tests for the static and offset command groups."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from chronoform.cli import cli

T0 = "2023-07-25T00:00:00Z"


@pytest.mark.usefixtures("_isolated_workspace")
class TestStaticCommands:
    def test_apply_keeps_first_value(self, cli_runner: CliRunner) -> None:
        first = cli_runner.invoke(cli, ["--json", "--now", T0, "static", "apply", "built"])
        assert first.exit_code == 0
        later = cli_runner.invoke(
            cli, ["--json", "--now", "2024-01-01T00:00:00Z", "static", "apply", "built"]
        )
        data = json.loads(later.stdout)["data"]
        assert data["action"] == "no-op"
        assert data["attributes"]["rfc3339"] == T0

    def test_explicit_timestamp(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "static", "apply", "released", "--rfc3339", "2023-07-25T12:00:00+02:00"]
        )
        attrs = json.loads(result.stdout)["data"]["attributes"]
        assert attrs["rfc3339"] == "2023-07-25T10:00:00Z"
        assert attrs["hour"] == 10

    def test_malformed_timestamp(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "static", "apply", "released", "--rfc3339", "2023-07-25"]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "MALFORMED_TIMESTAMP"

    def test_show(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["--now", T0, "static", "apply", "built"])
        result = cli_runner.invoke(cli, ["static", "show", "built"])
        assert result.exit_code == 0
        assert "state: active" in result.stdout


@pytest.mark.usefixtures("_isolated_workspace")
class TestOffsetCommands:
    def test_negative_offset(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "--now", T0, "offset", "apply", "window", "--offset-hours", "-6"]
        )
        assert result.exit_code == 0
        attrs = json.loads(result.stdout)["data"]["attributes"]
        assert attrs["base_rfc3339"] == T0
        assert attrs["rfc3339"] == "2023-07-24T18:00:00Z"

    def test_combined_units(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "offset",
                "plan",
                "trial",
                "--base-rfc3339",
                "2023-01-31T00:00:00Z",
                "--offset-months",
                "1",
                "--offset-days",
                "1",
            ],
        )
        data = json.loads(result.stdout)["data"]
        assert data["action"] == "create"
        assert data["attributes"]["rfc3339"] == "2023-03-01T00:00:00Z"
        assert data["unknown"] == []

    def test_missing_offset(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "offset", "apply", "window"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "MALFORMED_SCHEDULE"

    def test_import(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "offset", "import", "window", "2023-07-25T00:00:00Z,,,,-6,,"]
        )
        assert json.loads(result.stdout)["data"]["attributes"]["offset_hours"] == -6

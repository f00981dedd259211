"""Shared pytest fixtures for chronoform tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronoform.config.settings import ChronoSettings
from chronoform.domain.clock import FakeClock
from chronoform.infrastructure.workspace import Workspace

# 2023-07-25T00:00:00Z, the base instant used throughout the scenarios.
BASE = datetime(2023, 7, 25, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CHRONOFORM_* environment out of the tests."""
    for name in list(os.environ):
        if name.startswith("CHRONOFORM_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock pinned to :data:`BASE`."""
    return FakeClock(BASE)


@pytest.fixture
def settings(tmp_path: Path) -> ChronoSettings:
    return ChronoSettings.from_cli(root=tmp_path)


@pytest.fixture
def workspace(settings: ChronoSettings, fake_clock: FakeClock) -> Iterator[Workspace]:
    """Workspace on a temp directory, driven by ``fake_clock``, no plugins."""
    ws = Workspace(settings, clock=fake_clock)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated state DB.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)

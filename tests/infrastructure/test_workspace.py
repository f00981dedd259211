"""Tests for Workspace, the state transaction and the database engine."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy import inspect, text

from chronoform.config.settings import ChronoSettings
from chronoform.domain.clock import FakeClock, SystemClock
from chronoform.domain.entity import StaticEntity
from chronoform.infrastructure.database.engine import init_database
from chronoform.infrastructure.workspace import Workspace, resolve_clock

STAMP = StaticEntity(base_instant=datetime(2023, 7, 25, tzinfo=UTC))


class TestInitDatabase:
    def test_creates_tables_and_parents(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "state.db"
        engine = init_database(db_path)
        try:
            assert db_path.exists()
            assert inspect(engine).get_table_names() == ["resources"]
        finally:
            engine.dispose()

    def test_wal_mode(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "state.db")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        finally:
            engine.dispose()

    def test_busy_timeout(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "state.db", busy_timeout_ms=1234)
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA busy_timeout")).scalar() == 1234
        finally:
            engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path / "state.db").dispose()
        init_database(tmp_path / "state.db").dispose()


class TestStateTransaction:
    def test_put_get(self, workspace: Workspace) -> None:
        with workspace.transaction() as txn:
            txn.put("stamp", "static", STAMP, STAMP.to_attributes())
        with workspace.transaction() as txn:
            stored = txn.get("stamp")
        assert stored is not None
        assert stored.resource_type == "static"
        assert StaticEntity.model_validate(stored.entity) == STAMP
        assert stored.attributes["id"] == "2023-07-25T00:00:00Z"
        assert stored.created == stored.modified == "2023-07-25T00:00:00Z"

    def test_put_overwrites_and_keeps_created(
        self, workspace: Workspace, fake_clock: FakeClock
    ) -> None:
        with workspace.transaction() as txn:
            txn.put("stamp", "static", STAMP, STAMP.to_attributes())
        fake_clock.set(datetime(2023, 7, 26, tzinfo=UTC))
        with workspace.transaction() as txn:
            txn.put("stamp", "static", STAMP, {"id": "changed"})
            stored = txn.get("stamp")
        assert stored.attributes == {"id": "changed"}
        assert stored.created == "2023-07-25T00:00:00Z"
        assert stored.modified == "2023-07-26T00:00:00Z"

    def test_remove(self, workspace: Workspace) -> None:
        with workspace.transaction() as txn:
            txn.put("stamp", "static", STAMP, {})
            assert txn.remove("stamp") is True
            assert txn.remove("stamp") is False
            assert txn.get("stamp") is None

    def test_rollback_on_error(self, workspace: Workspace) -> None:
        with pytest.raises(RuntimeError), workspace.transaction() as txn:
            txn.put("stamp", "static", STAMP, {})
            raise RuntimeError("abort")
        with workspace.transaction() as txn:
            assert txn.get("stamp") is None

    def test_list_filters_and_sorts(self, workspace: Workspace) -> None:
        with workspace.transaction() as txn:
            txn.put("b", "static", STAMP, {})
            txn.put("a", "static", STAMP, {})
            txn.put("c", "rotating", STAMP, {})
            assert [r.address for r in txn.list_resources()] == ["a", "b", "c"]
            assert [r.address for r in txn.list_resources("rotating")] == ["c"]


class TestWorkspace:
    def test_state_path_relative_to_root(self, workspace: Workspace, tmp_path: Path) -> None:
        assert workspace.state_path == tmp_path / ".chronoform" / "state.db"
        assert workspace.state_path.exists()

    def test_absolute_state_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "elsewhere" / "chrono.db"
        monkeypatch.setenv("CHRONOFORM_STATE__PATH", str(target))
        ws = Workspace(ChronoSettings.from_cli(root=tmp_path / "root"))
        try:
            assert ws.state_path == target
            assert target.exists()
        finally:
            ws.close()

    def test_plugins_disabled(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHRONOFORM_PLUGINS__ENABLED", "false")
        ws = Workspace(ChronoSettings.from_cli(root=tmp_path))
        try:
            assert ws.init_plugins() == []
            assert ws.plugin_manager is None
        finally:
            ws.close()

    def test_init_plugins_idempotent(self, settings: ChronoSettings) -> None:
        ws = Workspace(settings)
        try:
            first = ws.init_plugins()
            assert "audit" in first
            manager = ws.plugin_manager
            assert ws.init_plugins() == first
            assert ws.plugin_manager is manager
        finally:
            ws.close()


class TestResolveClock:
    def test_system_by_default(self, settings: ChronoSettings) -> None:
        assert isinstance(resolve_clock(settings), SystemClock)

    def test_now_flag_pins(self, tmp_path: Path) -> None:
        clock = resolve_clock(ChronoSettings.from_cli(root=tmp_path, now="2023-07-25T12:00:00Z"))
        assert clock.now() == datetime(2023, 7, 25, 12, tzinfo=UTC)

    def test_frozen_at_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "chronoform.toml").write_text('[clock]\nfrozen_at = "2024-01-01T00:00:00Z"\n')
        clock = resolve_clock(ChronoSettings.from_cli(root=tmp_path))
        assert clock.now() == datetime(2024, 1, 1, tzinfo=UTC)

    def test_now_flag_beats_config(self, tmp_path: Path) -> None:
        (tmp_path / "chronoform.toml").write_text('[clock]\nfrozen_at = "2024-01-01T00:00:00Z"\n')
        settings = ChronoSettings.from_cli(root=tmp_path, now="2023-07-25T00:00:00Z")
        assert resolve_clock(settings).now() == datetime(2023, 7, 25, tzinfo=UTC)

"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

from pathlib import Path

import pluggy

from chronoform.plugins.builtins.audit import AuditPlugin
from chronoform.plugins.manager import LOCAL_MODULE_PREFIX, PluginManager

hookimpl = pluggy.HookimplMarker("chronoform")

LOCAL_PLUGIN = '''
import pluggy

hookimpl = pluggy.HookimplMarker("chronoform")
SEEN = []


class Notifier:
    @hookimpl
    def post_expire(self, resource_type, address, deadline):
        SEEN.append(address)


class NotAPlugin:
    def post_expire(self, resource_type, address, deadline):
        raise AssertionError("never registered")
'''


class _DummyPlugin:
    def __init__(self) -> None:
        self.created: list[str] = []

    @hookimpl
    def post_create(self, resource_type: str, address: str, attributes: dict) -> None:
        self.created.append(address)


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        for name in ("post_create", "post_update", "post_delete", "post_expire", "post_import"):
            assert hasattr(pm.hook, name)

    def test_register_and_dispatch(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.hook.post_create(resource_type="static", address="stamp", attributes={})
        assert plugin.created == ["stamp"]
        assert pm.list_plugin_names() == ["dummy"]

    def test_register_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert pm.get_plugins() == []

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_loads_builtin_audit(self) -> None:
        pm = PluginManager()
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert "audit" in names
        assert any(isinstance(p, AuditPlugin) for p in pm.get_plugins())

    def test_disabled_entry_point_is_blocked(self) -> None:
        pm = PluginManager()
        names = pm.discover_and_load(disabled=["audit"])
        assert "audit" not in names


class TestLocalDiscovery:
    def test_loads_hook_classes(self, tmp_path: Path) -> None:
        (tmp_path / "notify.py").write_text(LOCAL_PLUGIN)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path, disabled=["audit"])
        assert names == [f"{LOCAL_MODULE_PREFIX}notify"]
        pm.hook.post_expire(resource_type="rotating", address="token", deadline="")

    def test_skips_private_and_disabled_files(self, tmp_path: Path) -> None:
        (tmp_path / "_helpers.py").write_text(LOCAL_PLUGIN)
        (tmp_path / "notify.py").write_text(LOCAL_PLUGIN)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path, disabled=["audit", "notify"])
        assert names == []

    def test_broken_file_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text("raise RuntimeError('nope')\n")
        pm = PluginManager()
        assert pm.discover_and_load(local_dir=tmp_path, disabled=["audit"]) == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        pm = PluginManager()
        assert pm.discover_and_load(local_dir=tmp_path / "absent", disabled=["audit"]) == []

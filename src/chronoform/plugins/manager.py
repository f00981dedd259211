"""PluginManager — finds lifecycle plugins and relays hook calls to them.

Two sources, loaded in order:
- the ``chronoform.plugins`` entry-point group (the built-in ``audit``
  plugin lives there);
- single-file plugins in the workspace's ``[plugins] local_dir``.

Names listed in ``[plugins] disabled`` are blocked in pluggy before either
source is read, so a disabled plugin is never imported into the registry.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import ModuleType

import pluggy

from chronoform.plugins.hookspecs import ChronoformHookSpec

PROJECT_NAME = "chronoform"
ENTRY_POINT_GROUP = "chronoform.plugins"
LOCAL_MODULE_PREFIX = "chronoform_local_plugin_"

logger = logging.getLogger(__name__)


def _implements_hooks(obj: object) -> bool:
    """Whether *obj* carries at least one ``@hookimpl`` method."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        callable(member) and hasattr(member, marker)
        for name, member in inspect.getmembers(obj)
        if not name.startswith("_")
    )


def _import_file(path: Path, module_name: str) -> ModuleType | None:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import local plugin %s", path)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Local plugin %s failed to import", path, exc_info=True)
        return None
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* itself that implement hooks."""
    for _name, cls in inspect.getmembers(module, inspect.isclass):
        if cls.__module__ == module.__name__ and _implements_hooks(cls):
            yield cls


class PluginManager:
    """Thin wrapper over a ``pluggy.PluginManager`` bound to chronoform hooks."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ChronoformHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        """Relay used by services to fire ``post_*`` events."""
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def discover_and_load(
        self,
        *,
        local_dir: Path | None = None,
        disabled: Iterable[str] = (),
    ) -> list[str]:
        """Load entry-point plugins, then local ones; return the loaded names.

        *disabled* matches entry-point names (``"audit"``) and local file
        stems (``"notify"`` for ``notify.py``).
        """
        blocked = set(disabled)
        for name in blocked:
            self._pm.set_blocked(name)
            self._pm.set_blocked(LOCAL_MODULE_PREFIX + name)

        loaded = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Entry-point plugins loaded: %d", loaded)
        self._instantiate_entry_point_classes()

        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_") and path.stem not in blocked:
                    self._load_local(path)

        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an already-built plugin object."""
        self._pm.register(plugin, name=name or type(plugin).__name__)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Registered plugin names, sorted."""
        names = (self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins())
        return sorted(names)

    def _load_local(self, path: Path) -> None:
        module_name = LOCAL_MODULE_PREFIX + path.stem
        module = _import_file(path, module_name)
        if module is None:
            return
        for cls in _hook_classes(module):
            try:
                self.register_plugin(cls(), name=module_name)
            except Exception:
                logger.warning(
                    "Local plugin class %s in %s could not be registered",
                    cls.__name__,
                    path,
                    exc_info=True,
                )
            else:
                logger.debug("Registered local plugin %s from %s", cls.__name__, path)

    def _instantiate_entry_point_classes(self) -> None:
        """Replace plugin classes registered from entry points with instances.

        An entry point may name a class; pluggy would then call its hooks
        without an instance.
        """
        for plugin in self.get_plugins():
            if not inspect.isclass(plugin) or not _implements_hooks(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Entry-point plugin %s could not be built", name, exc_info=True)

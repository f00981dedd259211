"""Fixtures for service tests: a workspace with a recording plugin attached."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pluggy
import pytest

from chronoform.config.settings import ChronoSettings
from chronoform.domain.clock import FakeClock
from chronoform.infrastructure.workspace import Workspace
from chronoform.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("chronoform")


class RecordingPlugin:
    """Remembers every lifecycle hook call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def payload(self, name: str) -> dict[str, Any]:
        return next(kwargs for hook, kwargs in self.calls if hook == name)

    @hookimpl
    def post_create(self, resource_type: str, address: str, attributes: dict[str, Any]) -> None:
        self.calls.append(("post_create", {"address": address, "attributes": attributes}))

    @hookimpl
    def post_update(
        self,
        resource_type: str,
        address: str,
        fields_changed: list[str],
        attributes: dict[str, Any],
    ) -> None:
        self.calls.append(("post_update", {"address": address, "fields_changed": fields_changed}))

    @hookimpl
    def post_delete(self, resource_type: str, address: str) -> None:
        self.calls.append(("post_delete", {"resource_type": resource_type, "address": address}))

    @hookimpl
    def post_expire(self, resource_type: str, address: str, deadline: str) -> None:
        self.calls.append(("post_expire", {"address": address, "deadline": deadline}))

    @hookimpl
    def post_import(self, resource_type: str, address: str, identifier: str) -> None:
        self.calls.append(("post_import", {"address": address, "identifier": identifier}))


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def plugged_workspace(
    settings: ChronoSettings, fake_clock: FakeClock, recorder: RecordingPlugin
) -> Iterator[Workspace]:
    """Workspace whose plugin manager holds only ``recorder``."""
    pm = PluginManager()
    pm.register_plugin(recorder, name="recorder")
    ws = Workspace(settings, clock=fake_clock, plugin_manager=pm)
    try:
        yield ws
    finally:
        ws.close()

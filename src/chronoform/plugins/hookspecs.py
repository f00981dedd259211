"""Pluggy hook specifications for resource lifecycle events.

Hooks run synchronously after the state transaction that caused them has
committed. Every payload is JSON-safe.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("chronoform")


class ChronoformHookSpec:
    """Hook specifications for the chronoform plugin system."""

    @hookspec
    def post_create(
        self,
        resource_type: str,
        address: str,
        attributes: dict[str, Any],
    ) -> None:
        """Called after a resource is created (including the new half of a replace)."""

    @hookspec
    def post_update(
        self,
        resource_type: str,
        address: str,
        fields_changed: list[str],
        attributes: dict[str, Any],
    ) -> None:
        """Called after an in-place update, e.g. a recomputed rotation deadline."""

    @hookspec
    def post_delete(self, resource_type: str, address: str) -> None:
        """Called after a resource leaves state by delete or replacement."""

    @hookspec
    def post_expire(self, resource_type: str, address: str, deadline: str) -> None:
        """Called after a read removed a resource whose deadline has passed."""

    @hookspec
    def post_import(self, resource_type: str, address: str, identifier: str) -> None:
        """Called after a resource is imported from its identifier."""

"""Built-in audit plugin: one structured log event per lifecycle hook.

Registered through the ``chronoform.plugins`` entry point as ``audit``;
disable it with ``[plugins] disabled = ["audit"]``. Events go to the
``chronoform.audit`` logger, so ``--log-json`` turns them into an
append-friendly JSON trail on stderr.
"""

from __future__ import annotations

from typing import Any

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("chronoform")


class AuditPlugin:
    """Logs every resource lifecycle event."""

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger or structlog.get_logger("chronoform.audit")

    @hookimpl
    def post_create(self, resource_type: str, address: str, attributes: dict[str, Any]) -> None:
        self._log.info(
            "resource.created",
            resource_type=resource_type,
            address=address,
            id=attributes.get("id"),
            rfc3339=attributes.get("rfc3339"),
        )

    @hookimpl
    def post_update(
        self,
        resource_type: str,
        address: str,
        fields_changed: list[str],
        attributes: dict[str, Any],
    ) -> None:
        self._log.info(
            "resource.updated",
            resource_type=resource_type,
            address=address,
            fields_changed=fields_changed,
        )

    @hookimpl
    def post_delete(self, resource_type: str, address: str) -> None:
        self._log.info("resource.deleted", resource_type=resource_type, address=address)

    @hookimpl
    def post_expire(self, resource_type: str, address: str, deadline: str) -> None:
        # Shown at the default WARNING level.
        self._log.warning(
            "resource.expired",
            resource_type=resource_type,
            address=address,
            deadline=deadline,
        )

    @hookimpl
    def post_import(self, resource_type: str, address: str, identifier: str) -> None:
        self._log.info(
            "resource.imported",
            resource_type=resource_type,
            address=address,
            identifier=identifier,
        )

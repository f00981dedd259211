"""Workspace — the single dependency injected into every service.

The Workspace owns the state database engine, the clock and the plugin
manager. Services own their transaction boundaries via
``self._workspace.transaction()``; the yielded :class:`StateTransaction`
is the only way state rows are read or written.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from chronoform.domain.clock import Clock, FakeClock, SystemClock
from chronoform.domain.timestamps import format_rfc3339, parse_rfc3339
from chronoform.infrastructure.database.engine import init_database
from chronoform.infrastructure.database.schema import resources

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pydantic import BaseModel
    from sqlalchemy import Connection

    from chronoform.config.settings import ChronoSettings
    from chronoform.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredResource:
    """One committed state row."""

    address: str
    resource_type: str
    entity: dict[str, Any]
    attributes: dict[str, Any]
    created: str
    modified: str


@dataclass
class StateTransaction:
    """Active transaction over the ``resources`` table."""

    conn: Connection
    clock: Clock

    def get(self, address: str) -> StoredResource | None:
        row = self.conn.execute(select(resources).where(resources.c.address == address)).first()
        if row is None:
            return None
        return _to_stored(row)

    def put(
        self,
        address: str,
        resource_type: str,
        entity: BaseModel,
        attributes: dict[str, Any],
    ) -> None:
        """Insert or replace the row for *address*."""
        now = format_rfc3339(self.clock.now())
        values = {
            "resource_type": resource_type,
            "entity": entity.model_dump_json(),
            "attributes": json.dumps(attributes, sort_keys=True),
            "modified": now,
        }
        exists = self.conn.execute(
            select(resources.c.address).where(resources.c.address == address)
        ).first()
        if exists is None:
            self.conn.execute(insert(resources).values(address=address, created=now, **values))
        else:
            self.conn.execute(
                update(resources).where(resources.c.address == address).values(**values)
            )

    def remove(self, address: str) -> bool:
        """Delete the row for *address*. Returns False if it did not exist."""
        result = self.conn.execute(delete(resources).where(resources.c.address == address))
        return bool(result.rowcount)

    def list_resources(self, resource_type: str | None = None) -> list[StoredResource]:
        stmt = select(resources).order_by(resources.c.address)
        if resource_type is not None:
            stmt = stmt.where(resources.c.resource_type == resource_type)
        return [_to_stored(row) for row in self.conn.execute(stmt).fetchall()]


def _to_stored(row: Any) -> StoredResource:
    return StoredResource(
        address=row.address,
        resource_type=row.resource_type,
        entity=json.loads(row.entity),
        attributes=json.loads(row.attributes),
        created=row.created,
        modified=row.modified,
    )


def resolve_clock(settings: ChronoSettings) -> Clock:
    """Pick the clock for a run: pinned (``--now`` / ``[clock] frozen_at``) or system."""
    if settings.pinned_now:
        return FakeClock(parse_rfc3339(settings.pinned_now))
    return SystemClock()


class Workspace:
    """Directory-scoped state, clock and plugins for one chronoform run."""

    def __init__(
        self,
        settings: ChronoSettings,
        *,
        clock: Clock | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._root = settings.root
        self._clock = clock if clock is not None else resolve_clock(settings)
        self._engine = init_database(
            self.state_path, busy_timeout_ms=settings.state.busy_timeout_ms
        )
        self._plugin_manager = plugin_manager

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings(self) -> ChronoSettings:
        return self._settings

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def state_path(self) -> Path:
        path = Path(self._settings.state.path)
        return path if path.is_absolute() else self._root / path

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._plugin_manager

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[StateTransaction]:
        """Open a DB transaction; commits on success, rolls back on error."""
        with self._engine.begin() as conn:
            yield StateTransaction(conn=conn, clock=self._clock)

    def init_plugins(self) -> list[str]:
        """Create the plugin manager and load plugins (idempotent).

        Returns the loaded plugin names. No-op when ``[plugins] enabled``
        is false.
        """
        if self._plugin_manager is not None:
            return self._plugin_manager.list_plugin_names()
        config = self._settings.plugins
        if not config.enabled:
            return []

        from chronoform.plugins.manager import PluginManager

        pm = PluginManager()
        local_dir = self._root / config.local_dir
        names = pm.discover_and_load(local_dir=local_dir, disabled=config.disabled)
        self._plugin_manager = pm
        logger.debug("Loaded plugins: %s", names)
        return names

    def close(self) -> None:
        self._engine.dispose()

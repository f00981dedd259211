"""SQLite engine for the state database.

Each connection runs in WAL mode and waits up to ``busy_timeout_ms`` for a
concurrent run's write lock instead of failing at once. Tables come from
:data:`~chronoform.infrastructure.database.schema.metadata`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from chronoform.infrastructure.database.schema import metadata

DEFAULT_BUSY_TIMEOUT_MS = 5000


def create_db_engine(db_path: Path, *, busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS) -> Engine:
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _configure_connection(dbapi_conn: Any, _record: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    return engine


def init_database(db_path: Path, *, busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS) -> Engine:
    """Open (creating if needed) the state database at *db_path*.

    Parent directories and tables are created when missing; an existing
    database is left as is.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout_ms=busy_timeout_ms)
    metadata.create_all(engine)
    return engine

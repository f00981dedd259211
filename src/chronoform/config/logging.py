"""structlog setup shared by stdlib loggers and plugin event loggers.

Module loggers (``logging.getLogger(__name__)``) and structlog loggers such
as ``chronoform.audit`` pass through one processor chain and end up on
stderr, as console lines or, with ``--log-json``, as JSON lines. Datetime
values in event fields are written as RFC 3339 UTC strings.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from chronoform.domain.timestamps import format_rfc3339

# Libraries whose DEBUG chatter stays hidden even with --verbose.
QUIET_LIBRARIES = ("sqlalchemy", "pluggy")


def _rfc3339_instants(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if isinstance(value, datetime) and value.tzinfo is not None:
            event_dict[key] = format_rfc3339(value)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _rfc3339_instants,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all chronoform logging to stderr through structlog.

    Safe to call more than once; each call replaces the root handler.

    Args:
        verbose: Show DEBUG records from ``chronoform.*`` loggers.
        log_json: Render JSON lines instead of console lines.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("chronoform").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

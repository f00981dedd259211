"""Clock sources.

The engine never reads the system time directly. Every service receives a
:class:`Clock` and calls ``now()`` at most once per evaluation.

``now()`` always returns a timezone-aware UTC datetime truncated to whole
seconds, because persisted timestamps are RFC 3339 with second precision
and a sub-second remainder would make a stored value differ from the
instant it was derived from.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol, runtime_checkable

from dateutil.relativedelta import relativedelta


@runtime_checkable
class Clock(Protocol):
    """Capability supplying the current instant."""

    def now(self) -> datetime: ...


def _truncate(moment: datetime) -> datetime:
    return moment.astimezone(UTC).replace(microsecond=0)


class SystemClock:
    """Production clock backed by the host's wall clock."""

    def now(self) -> datetime:
        return _truncate(datetime.now(UTC))


class FakeClock:
    """Controllable clock for tests and pinned runs.

    Time only moves forward through :meth:`advance` and :meth:`advance_date`.
    :meth:`set` is the explicit escape hatch for rewinding, e.g. to set up
    already-expired scenarios.
    """

    def __init__(self, now: datetime) -> None:
        if now.tzinfo is None:
            raise ValueError("FakeClock requires a timezone-aware datetime")
        self._now = _truncate(now)

    def now(self) -> datetime:
        return self._now

    def since(self, moment: datetime) -> timedelta:
        return self._now - moment

    def advance(self, duration: timedelta) -> None:
        """Move the clock forward by *duration* (must not be negative)."""
        if duration < timedelta(0):
            raise ValueError(f"FakeClock cannot move backwards (got {duration})")
        self._now = _truncate(self._now + duration)

    def advance_date(self, years: int = 0, months: int = 0, days: int = 0) -> None:
        """Move the clock forward by calendar units."""
        target = self._now + relativedelta(years=years, months=months, days=days)
        if target < self._now:
            raise ValueError("FakeClock cannot move backwards")
        self._now = _truncate(target)

    def set(self, now: datetime) -> None:
        """Jump to an arbitrary instant, including the past."""
        if now.tzinfo is None:
            raise ValueError("FakeClock requires a timezone-aware datetime")
        self._now = _truncate(now)

"""RFC 3339 timestamp helpers and calendar arithmetic.

All instants handled by the engine are timezone-aware UTC datetimes with
second precision. Strings are rendered as ``YYYY-MM-DDTHH:MM:SSZ``.

Calendar arithmetic (years, months, days) follows
:class:`dateutil.relativedelta.relativedelta`: when the target month is
shorter than the source day, the day is clamped to the last valid day of
the target month (``2023-01-31 + 1 month == 2023-02-28``). Hours, minutes
and seconds are absolute durations.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta

from chronoform.domain.errors import MalformedSchedule, MalformedTimestamp

RFC3339_PATTERN = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})"
    r"T(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?P<fraction>\.\d+)?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

CALENDAR_UNITS = ("years", "months", "days")
CLOCK_UNITS = ("hours", "minutes", "seconds")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def ensure_utc(moment: datetime) -> datetime:
    """Normalize an aware datetime to UTC at second precision.

    Raises ValueError for naive datetimes; comparing a naive and an aware
    value would otherwise silently compare wall-clock readings.
    """
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError(f"Expected a timezone-aware datetime, got naive {moment!r}")
    return moment.astimezone(UTC).replace(microsecond=0)


def is_rfc3339(value: str) -> bool:
    """Check whether *value* is a well-formed RFC 3339 timestamp."""
    try:
        parse_rfc3339(value)
    except MalformedTimestamp:
        return False
    return True


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 string into a UTC datetime.

    Fractional seconds are accepted and dropped.
    """
    match = RFC3339_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise MalformedTimestamp(
            f"{value!r} is not a valid RFC3339 timestamp", value=str(value)
        )
    offset = match["offset"]
    text = f"{match['date']}T{match['time']}{'+00:00' if offset == 'Z' else offset}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise MalformedTimestamp(
            f"{value!r} is not a valid RFC3339 timestamp: {exc}", value=value
        ) from exc
    try:
        return ensure_utc(parsed)
    except OverflowError as exc:
        raise MalformedTimestamp(
            f"{value!r} is outside years 1-9999 once converted to UTC", value=value
        ) from exc


def format_rfc3339(moment: datetime) -> str:
    """Render an aware datetime as a UTC RFC 3339 string."""
    return ensure_utc(moment).strftime(RFC3339_FORMAT)


def unix_seconds(moment: datetime) -> int:
    return int(ensure_utc(moment).timestamp())


def add_units(moment: datetime, **units: int) -> datetime:
    """Advance *moment* by all given units in a single step.

    Accepted keywords: years, months, days, hours, minutes, seconds.
    Calendar units are applied first (years, months, then days), followed
    by the absolute clock units.

    Raises:
        MalformedSchedule: the result falls outside years 1-9999.
    """
    unknown = set(units) - set(CALENDAR_UNITS) - set(CLOCK_UNITS)
    if unknown:
        raise TypeError(f"Unknown time units: {sorted(unknown)}")
    calendar = {k: v for k, v in units.items() if k in CALENDAR_UNITS and v}
    clock = {k: v for k, v in units.items() if k in CLOCK_UNITS and v}
    result = ensure_utc(moment)
    try:
        if calendar:
            result = result + relativedelta(**calendar)
        if clock:
            result = result + timedelta(**clock)
    except (OverflowError, ValueError) as exc:
        steps = ", ".join(f"{count} {unit}" for unit, count in units.items() if count)
        raise MalformedSchedule(
            f"Adding {steps} to {format_rfc3339(moment)} leaves the supported "
            "date range (years 1-9999)",
            units={unit: count for unit, count in units.items() if count},
        ) from exc
    return result


def calendar_fields(moment: datetime) -> dict[str, Any]:
    """Full calendar breakdown of an instant (used by the parse functions)."""
    utc = ensure_utc(moment)
    iso_year, iso_week, _ = utc.isocalendar()
    weekday = (utc.weekday() + 1) % 7  # Sunday == 0
    return {
        "year": utc.year,
        "year_day": utc.timetuple().tm_yday,
        "day": utc.day,
        "month": utc.month,
        "month_name": MONTH_NAMES[utc.month - 1],
        "weekday": weekday,
        "weekday_name": WEEKDAY_NAMES[weekday],
        "hour": utc.hour,
        "minute": utc.minute,
        "second": utc.second,
        "iso_year": iso_year,
        "iso_week": iso_week,
    }

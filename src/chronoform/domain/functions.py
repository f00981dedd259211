"""Pure parse functions over timestamps and durations."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from fractions import Fraction
from typing import Any

from chronoform.domain.errors import MalformedDuration, MalformedTimestamp
from chronoform.domain.timestamps import (
    calendar_fields,
    format_rfc3339,
    parse_rfc3339,
    unix_seconds,
)

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

DURATION_UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_MAX_NANOSECONDS = 2**63 - 1

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)([a-zµμ]+)")
_DURATION = re.compile(r"^[-+]?(?:(?:\d+\.?\d*|\.\d+)[a-zµμ]+)+$")


def rfc3339_parse(timestamp: str) -> dict[str, Any]:
    """Break an RFC 3339 timestamp into its UTC calendar components."""
    moment = parse_rfc3339(timestamp)
    return {**calendar_fields(moment), "unix": unix_seconds(moment)}


def unix_timestamp_parse(seconds: int) -> dict[str, Any]:
    """Break a Unix timestamp (seconds) into its UTC calendar components."""
    try:
        moment = datetime.fromtimestamp(seconds, UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedTimestamp(
            f"{seconds!r} is outside the supported timestamp range", value=str(seconds)
        ) from exc
    return {**calendar_fields(moment), "rfc3339": format_rfc3339(moment)}


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def parse_duration(text: str) -> int:
    """Parse a duration such as ``300ms``, ``-1.5h`` or ``2h45m`` into nanoseconds.

    The fractional part of each component is truncated at nanosecond
    precision. ``0`` is accepted without a unit.
    """
    if text in ("0", "+0", "-0"):
        return 0
    if not _DURATION.match(text):
        raise MalformedDuration(f"invalid duration {text!r}", value=text)

    sign = -1 if text.startswith("-") else 1
    total = 0
    for number, unit in _COMPONENT.findall(text.lstrip("+-")):
        scale = DURATION_UNITS.get(unit)
        if scale is None:
            raise MalformedDuration(f"unknown unit {unit!r} in duration {text!r}", value=text)
        total += int(Fraction(number) * scale)
        if total > _MAX_NANOSECONDS:
            raise MalformedDuration(f"invalid duration {text!r}: out of range", value=text)
    return sign * total


def duration_parse(text: str) -> dict[str, Any]:
    """Express a duration string in every unit from hours down to nanoseconds."""
    nanoseconds = parse_duration(text)
    return {
        "hours": nanoseconds / HOUR,
        "minutes": nanoseconds / MINUTE,
        "seconds": nanoseconds / SECOND,
        "milliseconds": _trunc_div(nanoseconds, MILLISECOND),
        "microseconds": _trunc_div(nanoseconds, MICROSECOND),
        "nanoseconds": nanoseconds,
    }

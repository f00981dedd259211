"""Import identifiers: flat, comma-separated positional strings.

Formats:
- rotating, explicit deadline: ``BASE,DEADLINE``
- rotating, calendar unit:     ``BASE,YEARS,MONTHS,DAYS,HOURS,MINUTES``
- offset:                      ``BASE,YEARS,MONTHS,DAYS,HOURS,MINUTES,SECONDS``
- static:                      ``BASE``

An empty position means "unit not set" and always decodes to ``None``,
never to ``0``.
"""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel

from chronoform.domain.entity import OffsetEntity, RotatingEntity, StaticEntity
from chronoform.domain.errors import MalformedIdentifier, MalformedSchedule, MalformedTimestamp
from chronoform.domain.offset import OFFSET_UNITS, OffsetSpec
from chronoform.domain.schedule import (
    CalendarSchedule,
    ExplicitSchedule,
    ScheduleUnit,
)
from chronoform.domain.timestamps import format_rfc3339, parse_rfc3339

SEPARATOR = ","
ROTATING_UNIT_FIELDS = tuple(str(unit) for unit in ScheduleUnit)

_INTEGER = re.compile(r"^[+-]?\d+$")

ROTATING_FORMATS = (
    "BASETIMESTAMP,YEARS,MONTHS,DAYS,HOURS,MINUTES or BASETIMESTAMP,ROTATIONTIMESTAMP"
)
OFFSET_FORMAT = "BASETIMESTAMP,YEARS,MONTHS,DAYS,HOURS,MINUTES,SECONDS"


class RotatingIdentifier(BaseModel):
    """Positional parts of a rotating identifier, before schedule validation."""

    model_config = {"frozen": True}

    base: datetime
    deadline: datetime | None = None
    years: int | None = None
    months: int | None = None
    days: int | None = None
    hours: int | None = None
    minutes: int | None = None

    def units(self) -> dict[str, int]:
        return {
            unit: value
            for unit in ROTATING_UNIT_FIELDS
            if (value := getattr(self, unit)) is not None
        }


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def _parse_timestamp_field(raw: str, value: str, field: str) -> datetime:
    try:
        return parse_rfc3339(value)
    except MalformedTimestamp as exc:
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): {field} {value!r} is not a valid "
            "RFC3339 timestamp",
            field=field,
        ) from exc


def _parse_int_field(raw: str, value: str, field: str) -> int | None:
    if value == "":
        return None
    if not _INTEGER.match(value):
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): could not parse {field} ({value!r}) as int",
            field=field,
        )
    return int(value)


# ---------------------------------------------------------------------------
# Rotating
# ---------------------------------------------------------------------------


def encode_rotating(entity: RotatingEntity) -> str:
    """Encode a rotating entity as its positional identifier."""
    base = format_rfc3339(entity.base_instant)
    schedule = entity.schedule
    if isinstance(schedule, ExplicitSchedule):
        return SEPARATOR.join([base, format_rfc3339(schedule.deadline)])
    counts = [
        str(schedule.count) if schedule.unit == unit else "" for unit in ROTATING_UNIT_FIELDS
    ]
    return SEPARATOR.join([base, *counts])


def split_rotating(raw: str) -> RotatingIdentifier:
    """Validate and split a rotating identifier without building a schedule.

    Keeps the difference between an absent unit (``None``) and an explicit
    ``0``; schedule rules are applied by :func:`decode_rotating`.
    """
    parts = raw.split(SEPARATOR)
    if len(parts) not in (2, 6):
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}), expected {ROTATING_FORMATS}",
            field="id",
            field_count=len(parts),
        )
    if parts[0] == "":
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): base timestamp is empty", field="base"
        )
    base = _parse_timestamp_field(raw, parts[0], "base")

    if len(parts) == 2:
        if parts[1] == "":
            raise MalformedIdentifier(
                f"Unexpected format of ID ({raw!r}), expected BASETIMESTAMP,ROTATIONTIMESTAMP",
                field="deadline",
            )
        return RotatingIdentifier(
            base=base, deadline=_parse_timestamp_field(raw, parts[1], "deadline")
        )

    if all(part == "" for part in parts[1:]):
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}), expected "
            "BASETIMESTAMP,YEARS,MONTHS,DAYS,HOURS,MINUTES where at least one "
            "rotation value is non-empty",
            field="schedule",
        )
    counts = {
        field: _parse_int_field(raw, value, field)
        for field, value in zip(ROTATING_UNIT_FIELDS, parts[1:], strict=True)
    }
    return RotatingIdentifier(base=base, **counts)


def decode_rotating(raw: str) -> RotatingEntity:
    """Rebuild a rotating entity from its identifier."""
    ident = split_rotating(raw)
    if ident.deadline is not None:
        return RotatingEntity.create(ident.base, ExplicitSchedule(deadline=ident.deadline))

    units = ident.units()
    if len(units) > 1:
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): only one rotation value may be set, "
            f"got {', '.join(units)}",
            field=",".join(units),
        )
    ((unit, count),) = units.items()
    if count < 1:
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): {unit} must be a positive integer, got {count}",
            field=unit,
        )
    schedule = CalendarSchedule(unit=ScheduleUnit(unit), count=count)
    try:
        return RotatingEntity.create(ident.base, schedule)
    except MalformedSchedule as exc:
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): {exc.message}", field=unit
        ) from exc


# ---------------------------------------------------------------------------
# Offset and static
# ---------------------------------------------------------------------------


def encode_offset(entity: OffsetEntity) -> str:
    base = format_rfc3339(entity.base_instant)
    values = [
        "" if (v := getattr(entity.offset, unit)) is None else str(v) for unit in OFFSET_UNITS
    ]
    return SEPARATOR.join([base, *values])


def decode_offset(raw: str) -> OffsetEntity:
    parts = raw.split(SEPARATOR)
    if len(parts) != 1 + len(OFFSET_UNITS):
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}), expected {OFFSET_FORMAT}",
            field="id",
            field_count=len(parts),
        )
    if parts[0] == "" or all(part == "" for part in parts[1:]):
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}), expected {OFFSET_FORMAT} "
            "where at least one offset value is non-empty",
            field="base" if parts[0] == "" else "offset",
        )
    base = _parse_timestamp_field(raw, parts[0], "base")
    offsets = {
        unit: _parse_int_field(raw, value, unit)
        for unit, value in zip(OFFSET_UNITS, parts[1:], strict=True)
    }
    try:
        return OffsetEntity.create(base, OffsetSpec(**offsets))
    except MalformedSchedule as exc:
        raise MalformedIdentifier(
            f"Unexpected format of ID ({raw!r}): {exc.message}", field="offset"
        ) from exc


def encode_static(entity: StaticEntity) -> str:
    return format_rfc3339(entity.base_instant)


def decode_static(raw: str) -> StaticEntity:
    return StaticEntity(base_instant=_parse_timestamp_field(raw, raw, "id"))

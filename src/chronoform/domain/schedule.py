"""Rotation schedules, the deadline resolver and the change detector.

A schedule is a tagged union: either one calendar unit with a positive
count, or an explicit deadline. :func:`build_schedule` turns the flat
``rotation_*`` arguments a caller supplies into exactly one variant, and
rejects anything else before the resolver runs.

INVARIANT: only one unit per schedule. Units are never compounded.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

from chronoform.domain.errors import (
    AmbiguousSchedule,
    MalformedSchedule,
    MalformedTimestamp,
    MissingSchedule,
)
from chronoform.domain.timestamps import add_units, ensure_utc, parse_rfc3339


class ScheduleUnit(StrEnum):
    """Calendar units a rotation can be expressed in, in identifier order."""

    YEARS = "years"
    MONTHS = "months"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"


class CalendarSchedule(BaseModel):
    """Rotate ``count`` units after the base instant."""

    model_config = {"frozen": True}

    kind: Literal["calendar"] = "calendar"
    unit: ScheduleUnit
    count: int = Field(ge=1)


class ExplicitSchedule(BaseModel):
    """Rotate at a fixed instant."""

    model_config = {"frozen": True}

    kind: Literal["explicit"] = "explicit"
    deadline: datetime

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: datetime) -> datetime:
        return ensure_utc(value)


Schedule = Annotated[CalendarSchedule | ExplicitSchedule, Field(discriminator="kind")]


def build_schedule(
    *,
    years: int | None = None,
    months: int | None = None,
    days: int | None = None,
    hours: int | None = None,
    minutes: int | None = None,
    rfc3339: str | datetime | None = None,
) -> CalendarSchedule | ExplicitSchedule:
    """Build the single schedule variant described by the ``rotation_*`` inputs.

    Raises:
        MalformedSchedule: a count is not positive or the deadline is not RFC 3339.
        AmbiguousSchedule: more than one input is set.
        MissingSchedule: no input is set.
    """
    counts = {
        ScheduleUnit.YEARS: years,
        ScheduleUnit.MONTHS: months,
        ScheduleUnit.DAYS: days,
        ScheduleUnit.HOURS: hours,
        ScheduleUnit.MINUTES: minutes,
    }
    supplied = [str(unit) for unit, count in counts.items() if count is not None]
    if rfc3339 is not None and rfc3339 != "":
        supplied.append("rfc3339")

    if not supplied:
        raise MissingSchedule(
            "At least one of rotation_years, rotation_months, rotation_days, "
            "rotation_hours, rotation_minutes or rotation_rfc3339 must be set"
        )
    if len(supplied) > 1:
        names = ", ".join(f"rotation_{name}" for name in supplied)
        raise AmbiguousSchedule(
            f"Only one rotation argument may be set, got: {names}", fields=supplied
        )

    if supplied == ["rfc3339"]:
        return ExplicitSchedule(deadline=_parse_deadline(rfc3339))

    unit = ScheduleUnit(supplied[0])
    count = counts[unit]
    assert count is not None
    _check_count(unit, count)
    return CalendarSchedule(unit=unit, count=count)


def _parse_deadline(value: str | datetime | None) -> datetime:
    if isinstance(value, datetime):
        try:
            return ensure_utc(value)
        except (OverflowError, ValueError) as exc:
            raise MalformedSchedule(str(exc), field="rotation_rfc3339") from exc
    try:
        return parse_rfc3339(str(value))
    except MalformedTimestamp as exc:
        raise MalformedSchedule(
            f"rotation_rfc3339: {exc.message}", field="rotation_rfc3339"
        ) from exc


def _check_count(unit: ScheduleUnit, count: Any) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise MalformedSchedule(
            f"rotation_{unit} must be a positive integer, got {count!r}",
            field=f"rotation_{unit}",
        )


def resolve(base_instant: datetime, schedule: CalendarSchedule | ExplicitSchedule) -> datetime:
    """Compute the rotation deadline for *schedule* starting at *base_instant*.

    Pure and deterministic. An explicit deadline is returned verbatim; a
    calendar schedule advances the base by exactly its one unit.
    """
    if isinstance(schedule, ExplicitSchedule):
        return schedule.deadline
    _check_count(schedule.unit, schedule.count)
    return add_units(base_instant, **{str(schedule.unit): schedule.count})


def needs_recompute(
    previous: CalendarSchedule | ExplicitSchedule | None,
    requested: CalendarSchedule | ExplicitSchedule,
) -> bool:
    """Decide whether the stored deadline must be recomputed.

    Only a semantic schedule change counts; explicit deadlines compare as
    instants, so differently written offsets of the same moment are equal.
    """
    if previous is None:
        return True
    return previous != requested


def schedule_columns(schedule: CalendarSchedule | ExplicitSchedule) -> dict[str, Any]:
    """Flatten a schedule into the ``rotation_*`` attribute columns."""
    columns: dict[str, Any] = {f"rotation_{unit}": None for unit in ScheduleUnit}
    if isinstance(schedule, CalendarSchedule):
        columns[f"rotation_{schedule.unit}"] = schedule.count
    return columns

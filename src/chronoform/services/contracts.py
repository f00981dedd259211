"""Typed input contracts for the resource services.

Each model mirrors the arguments a caller sets on one resource type.
They are plain data; schedule and timestamp rules are applied lazily by
the accessor methods so that a malformed value surfaces as a
:class:`~chronoform.domain.errors.ChronoformError` inside the service
call rather than as a pydantic validation error at the boundary.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from chronoform.domain.offset import OffsetSpec
from chronoform.domain.schedule import CalendarSchedule, ExplicitSchedule, build_schedule
from chronoform.domain.timestamps import parse_rfc3339


def _optional_instant(value: str | None) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_rfc3339(value)


class StaticArgs(BaseModel):
    """Arguments for a ``static`` resource."""

    model_config = {"frozen": True}

    rfc3339: str | None = None
    triggers: dict[str, str] = Field(default_factory=dict)

    def base_instant(self) -> datetime | None:
        return _optional_instant(self.rfc3339)


class RotatingArgs(BaseModel):
    """Arguments for a ``rotating`` resource."""

    model_config = {"frozen": True}

    rfc3339: str | None = None
    rotation_years: int | None = None
    rotation_months: int | None = None
    rotation_days: int | None = None
    rotation_hours: int | None = None
    rotation_minutes: int | None = None
    rotation_rfc3339: str | None = None
    triggers: dict[str, str] = Field(default_factory=dict)

    def base_instant(self) -> datetime | None:
        return _optional_instant(self.rfc3339)

    def schedule(self) -> CalendarSchedule | ExplicitSchedule:
        return build_schedule(
            years=self.rotation_years,
            months=self.rotation_months,
            days=self.rotation_days,
            hours=self.rotation_hours,
            minutes=self.rotation_minutes,
            rfc3339=self.rotation_rfc3339,
        )


class OffsetArgs(BaseModel):
    """Arguments for an ``offset`` resource."""

    model_config = {"frozen": True}

    base_rfc3339: str | None = None
    offset_years: int | None = None
    offset_months: int | None = None
    offset_days: int | None = None
    offset_hours: int | None = None
    offset_minutes: int | None = None
    offset_seconds: int | None = None
    triggers: dict[str, str] = Field(default_factory=dict)

    def base_instant(self) -> datetime | None:
        return _optional_instant(self.base_rfc3339)

    def offset(self) -> OffsetSpec:
        return OffsetSpec(
            years=self.offset_years,
            months=self.offset_months,
            days=self.offset_days,
            hours=self.offset_hours,
            minutes=self.offset_minutes,
            seconds=self.offset_seconds,
        )

"""Entity models for the time resources.

Entities are frozen pydantic models. Derived calendar fields are
properties computed from the instant they describe, so they can never be
set independently of it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chronoform.domain.offset import OffsetSpec, apply_offset
from chronoform.domain.schedule import (
    CalendarSchedule,
    ExplicitSchedule,
    Schedule,
    resolve,
    schedule_columns,
)
from chronoform.domain.timestamps import ensure_utc, format_rfc3339, unix_seconds


class DerivedFields(BaseModel):
    """Calendar decomposition of a single instant."""

    model_config = {"frozen": True}

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    unix: int

    @classmethod
    def of(cls, moment: datetime) -> DerivedFields:
        utc = ensure_utc(moment)
        return cls(
            year=utc.year,
            month=utc.month,
            day=utc.day,
            hour=utc.hour,
            minute=utc.minute,
            second=utc.second,
            unix=unix_seconds(utc),
        )


class StaticEntity(BaseModel):
    """A timestamp captured once and kept."""

    model_config = {"frozen": True}

    base_instant: datetime
    triggers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_instant")
    @classmethod
    def normalize_instants(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def derived(self) -> DerivedFields:
        return DerivedFields.of(self.base_instant)

    def to_attributes(self) -> dict[str, Any]:
        rfc3339 = format_rfc3339(self.base_instant)
        return {
            "id": rfc3339,
            "rfc3339": rfc3339,
            "triggers": dict(self.triggers),
            **self.derived.model_dump(),
        }


class OffsetEntity(BaseModel):
    """A base timestamp and the instant reached by applying an offset to it."""

    model_config = {"frozen": True}

    base_instant: datetime
    offset: OffsetSpec
    offset_instant: datetime
    triggers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_instant", "offset_instant")
    @classmethod
    def normalize_instants(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def create(
        cls,
        base_instant: datetime,
        offset: OffsetSpec,
        triggers: dict[str, str] | None = None,
    ) -> OffsetEntity:
        return cls(
            base_instant=base_instant,
            offset=offset,
            offset_instant=apply_offset(base_instant, offset),
            triggers=triggers or {},
        )

    @property
    def derived(self) -> DerivedFields:
        return DerivedFields.of(self.offset_instant)

    def to_attributes(self) -> dict[str, Any]:
        return {
            "id": format_rfc3339(self.base_instant),
            "base_rfc3339": format_rfc3339(self.base_instant),
            "rfc3339": format_rfc3339(self.offset_instant),
            **{f"offset_{name}": value for name, value in self.offset.model_dump().items()},
            "triggers": dict(self.triggers),
            **self.derived.model_dump(),
        }


class RotatingEntity(BaseModel):
    """A base instant, its rotation schedule and the derived deadline.

    ``derived`` decomposes ``base_instant``; ``deadline`` is always
    ``resolve(base_instant, schedule)`` when built through :meth:`create`.
    """

    model_config = {"frozen": True}

    base_instant: datetime
    schedule: Schedule
    deadline: datetime
    triggers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_instant", "deadline")
    @classmethod
    def normalize_instants(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def create(
        cls,
        base_instant: datetime,
        schedule: CalendarSchedule | ExplicitSchedule,
        triggers: dict[str, str] | None = None,
    ) -> RotatingEntity:
        return cls(
            base_instant=base_instant,
            schedule=schedule,
            deadline=resolve(base_instant, schedule),
            triggers=triggers or {},
        )

    @property
    def derived(self) -> DerivedFields:
        return DerivedFields.of(self.base_instant)

    def with_schedule(self, schedule: CalendarSchedule | ExplicitSchedule) -> RotatingEntity:
        """Recompute the deadline for a new schedule, keeping the base instant."""
        return self.model_copy(
            update={"schedule": schedule, "deadline": resolve(self.base_instant, schedule)}
        )

    def to_attributes(self) -> dict[str, Any]:
        from chronoform.domain.ids import encode_rotating

        return {
            "id": encode_rotating(self),
            "rfc3339": format_rfc3339(self.base_instant),
            "rotation_rfc3339": format_rfc3339(self.deadline),
            **schedule_columns(self.schedule),
            "triggers": dict(self.triggers),
            **self.derived.model_dump(),
        }

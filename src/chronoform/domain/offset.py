"""Offset specifications for the offset resource.

Unlike rotation schedules, offsets may combine several units. All set
units are accumulated into one step: calendar units first (years, months,
days, via ``relativedelta``), then hours, minutes and seconds. Offsets may
be negative.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, model_validator

from chronoform.domain.errors import MalformedSchedule
from chronoform.domain.timestamps import add_units

OFFSET_UNITS = ("years", "months", "days", "hours", "minutes", "seconds")


class OffsetSpec(BaseModel):
    """Per-unit offsets; ``None`` means the unit was not supplied."""

    model_config = {"frozen": True}

    years: int | None = None
    months: int | None = None
    days: int | None = None
    hours: int | None = None
    minutes: int | None = None
    seconds: int | None = None

    @model_validator(mode="after")
    def require_one_unit(self) -> OffsetSpec:
        if all(getattr(self, unit) is None for unit in OFFSET_UNITS):
            raise MalformedSchedule(
                "At least one of offset_years, offset_months, offset_days, "
                "offset_hours, offset_minutes or offset_seconds must be set"
            )
        return self

    def units(self) -> dict[str, int]:
        """Supplied units only."""
        return {unit: value for unit in OFFSET_UNITS if (value := getattr(self, unit)) is not None}


def apply_offset(base_instant: datetime, offset: OffsetSpec) -> datetime:
    """Advance *base_instant* by every unit in *offset* at once."""
    return add_units(base_instant, **offset.units())

"""Preview/commit consistency guard.

A preview (plan) predicts the attributes an apply will produce. Any
attribute that depends on an input only known at commit time, which in
practice means a base instant defaulted to the commit-time clock, is
marked :data:`UNKNOWN` instead of being guessed.

INVARIANT: every concrete planned value equals the committed value.
A mismatch raises :class:`InconsistentPlan` and is never reconciled.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from chronoform.domain.entity import DerivedFields, OffsetEntity, RotatingEntity, StaticEntity
from chronoform.domain.errors import InconsistentPlan
from chronoform.domain.offset import OffsetSpec
from chronoform.domain.schedule import CalendarSchedule, ExplicitSchedule, schedule_columns
from chronoform.domain.timestamps import format_rfc3339

UNKNOWN_DISPLAY = "(known after apply)"


class _Unknown:
    """Placeholder for a value that will only be known after apply."""

    _instance: _Unknown | None = None

    def __new__(cls) -> _Unknown:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return UNKNOWN_DISPLAY

    def __bool__(self) -> bool:
        return False


UNKNOWN: Any = _Unknown()

DERIVED_FIELDS = tuple(DerivedFields.model_fields)


class PlanAction(StrEnum):
    """What applying a plan will do to the stored entity."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    NOOP = "no-op"


@dataclass(frozen=True)
class PlannedResource:
    """Predicted attributes for one resource, possibly containing UNKNOWN."""

    action: PlanAction
    attributes: dict[str, Any]
    replace_reasons: list[str] = field(default_factory=list)

    def unknown_fields(self) -> list[str]:
        return sorted(name for name, value in self.attributes.items() if value is UNKNOWN)

    def is_known(self, name: str) -> bool:
        return self.attributes.get(name, UNKNOWN) is not UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe rendering; unknown values become a display marker."""
        return {
            "action": str(self.action),
            "attributes": {
                name: UNKNOWN_DISPLAY if value is UNKNOWN else value
                for name, value in self.attributes.items()
            },
            "unknown": self.unknown_fields(),
            "replace_reasons": list(self.replace_reasons),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlannedResource:
        """Rebuild a plan rendered by :meth:`to_dict` (e.g. a saved plan file)."""
        unknown = set(data.get("unknown", []))
        attributes = {
            name: UNKNOWN if name in unknown else value
            for name, value in data.get("attributes", {}).items()
        }
        return cls(
            action=PlanAction(data["action"]),
            attributes=attributes,
            replace_reasons=list(data.get("replace_reasons", [])),
        )


def verify_commit(planned: Mapping[str, Any], committed: Mapping[str, Any]) -> None:
    """Check committed attributes against a preview.

    Unknown planned values accept any committed value. Raises
    InconsistentPlan on the first concrete value that differs.
    """
    for name, expected in planned.items():
        if expected is UNKNOWN:
            continue
        actual = committed.get(name, UNKNOWN)
        if actual is UNKNOWN or actual != expected:
            raise InconsistentPlan(name, expected, None if actual is UNKNOWN else actual)


# ---------------------------------------------------------------------------
# Per-resource previews
# ---------------------------------------------------------------------------


def _unknown_derived() -> dict[str, Any]:
    return dict.fromkeys(DERIVED_FIELDS, UNKNOWN)


def preview_rotating(
    base_instant: datetime | None,
    schedule: CalendarSchedule | ExplicitSchedule,
    triggers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Predict rotating attributes; ``base_instant=None`` means "now at commit"."""
    if base_instant is not None:
        return RotatingEntity.create(base_instant, schedule, dict(triggers or {})).to_attributes()

    # An explicit deadline does not depend on the base instant.
    deadline = (
        format_rfc3339(schedule.deadline) if isinstance(schedule, ExplicitSchedule) else UNKNOWN
    )
    return {
        "id": UNKNOWN,
        "rfc3339": UNKNOWN,
        "rotation_rfc3339": deadline,
        **schedule_columns(schedule),
        "triggers": dict(triggers or {}),
        **_unknown_derived(),
    }


def preview_static(
    base_instant: datetime | None,
    triggers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    if base_instant is not None:
        entity = StaticEntity(base_instant=base_instant, triggers=dict(triggers or {}))
        return entity.to_attributes()
    return {
        "id": UNKNOWN,
        "rfc3339": UNKNOWN,
        "triggers": dict(triggers or {}),
        **_unknown_derived(),
    }


def preview_offset(
    base_instant: datetime | None,
    offset: OffsetSpec,
    triggers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    if base_instant is not None:
        return OffsetEntity.create(base_instant, offset, dict(triggers or {})).to_attributes()
    return {
        "id": UNKNOWN,
        "base_rfc3339": UNKNOWN,
        "rfc3339": UNKNOWN,
        **{f"offset_{name}": value for name, value in offset.model_dump().items()},
        "triggers": dict(triggers or {}),
        **_unknown_derived(),
    }

"""Tests for previews, unknown markers and the commit guard."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from chronoform.domain.entity import RotatingEntity
from chronoform.domain.errors import InconsistentPlan
from chronoform.domain.offset import OffsetSpec
from chronoform.domain.plan import (
    UNKNOWN,
    UNKNOWN_DISPLAY,
    PlanAction,
    PlannedResource,
    preview_offset,
    preview_rotating,
    preview_static,
    verify_commit,
)
from chronoform.domain.schedule import build_schedule

BASE = datetime(2023, 7, 25, tzinfo=UTC)


class TestUnknown:
    def test_marker(self) -> None:
        assert repr(UNKNOWN) == UNKNOWN_DISPLAY
        assert not UNKNOWN
        assert type(UNKNOWN)() is UNKNOWN


class TestPreviewRotating:
    def test_deferred_base_leaves_deadline_unknown(self) -> None:
        attrs = preview_rotating(None, build_schedule(days=7))
        assert attrs["rotation_rfc3339"] is UNKNOWN
        assert attrs["rfc3339"] is UNKNOWN
        assert attrs["id"] is UNKNOWN
        assert attrs["year"] is UNKNOWN
        assert attrs["rotation_days"] == 7
        assert attrs["rotation_months"] is None

    def test_deferred_base_with_explicit_deadline(self) -> None:
        attrs = preview_rotating(None, build_schedule(rfc3339="2024-01-01T00:00:00Z"))
        assert attrs["rotation_rfc3339"] == "2024-01-01T00:00:00Z"
        assert attrs["rfc3339"] is UNKNOWN

    def test_known_base_is_fully_concrete(self) -> None:
        schedule = build_schedule(days=7)
        attrs = preview_rotating(BASE, schedule, {"v": "1"})
        assert UNKNOWN not in attrs.values()
        assert attrs == RotatingEntity.create(BASE, schedule, {"v": "1"}).to_attributes()
        assert attrs["rotation_rfc3339"] == "2023-08-01T00:00:00Z"


class TestPreviewOthers:
    def test_static(self) -> None:
        assert preview_static(None)["rfc3339"] is UNKNOWN
        assert preview_static(BASE)["rfc3339"] == "2023-07-25T00:00:00Z"

    def test_offset(self) -> None:
        attrs = preview_offset(None, OffsetSpec(days=1))
        assert attrs["rfc3339"] is UNKNOWN
        assert attrs["offset_days"] == 1
        assert preview_offset(BASE, OffsetSpec(days=1))["rfc3339"] == "2023-07-26T00:00:00Z"


class TestVerifyCommit:
    def test_unknown_accepts_anything(self) -> None:
        planned = preview_rotating(None, build_schedule(days=7))
        committed = RotatingEntity.create(BASE, build_schedule(days=7)).to_attributes()
        verify_commit(planned, committed)

    def test_concrete_mismatch_is_fatal(self) -> None:
        planned = preview_rotating(BASE, build_schedule(days=7))
        committed = RotatingEntity.create(BASE, build_schedule(days=8)).to_attributes()
        with pytest.raises(InconsistentPlan) as exc_info:
            verify_commit(planned, committed)
        assert exc_info.value.field in {"id", "rotation_rfc3339", "rotation_days"}
        assert "inconsistent result after apply" in exc_info.value.message

    def test_missing_committed_value(self) -> None:
        with pytest.raises(InconsistentPlan) as exc_info:
            verify_commit({"rfc3339": "2023-07-25T00:00:00Z"}, {})
        assert exc_info.value.field == "rfc3339"


class TestPlannedResource:
    def test_unknown_fields(self) -> None:
        planned = PlannedResource(PlanAction.CREATE, preview_static(None))
        assert planned.unknown_fields() == sorted(
            ["id", "rfc3339", "year", "month", "day", "hour", "minute", "second", "unix"]
        )
        assert planned.is_known("triggers")
        assert not planned.is_known("rfc3339")

    def test_dict_round_trip_restores_markers(self) -> None:
        planned = PlannedResource(
            PlanAction.REPLACE, preview_rotating(None, build_schedule(hours=1)), ["triggers"]
        )
        rendered = planned.to_dict()
        assert rendered["attributes"]["rfc3339"] == UNKNOWN_DISPLAY
        assert rendered["action"] == "replace"
        restored = PlannedResource.from_dict(rendered)
        assert restored.attributes["rfc3339"] is UNKNOWN
        assert restored == planned

"""Tests for entity models and their attribute views."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from chronoform.domain.entity import DerivedFields, OffsetEntity, RotatingEntity, StaticEntity
from chronoform.domain.errors import MalformedSchedule
from chronoform.domain.offset import OffsetSpec, apply_offset
from chronoform.domain.schedule import build_schedule

BASE = datetime(2023, 7, 25, 23, 43, 16, tzinfo=UTC)


class TestDerivedFields:
    def test_of(self) -> None:
        derived = DerivedFields.of(BASE)
        assert (derived.year, derived.month, derived.day) == (2023, 7, 25)
        assert (derived.hour, derived.minute, derived.second) == (23, 43, 16)
        assert derived.unix == 1690328596


class TestRotatingEntity:
    def test_create_resolves_deadline(self) -> None:
        entity = RotatingEntity.create(BASE, build_schedule(days=7))
        assert entity.deadline == datetime(2023, 8, 1, 23, 43, 16, tzinfo=UTC)

    def test_derived_fields_describe_base(self) -> None:
        entity = RotatingEntity.create(BASE, build_schedule(years=1))
        assert entity.derived.year == 2023
        assert entity.to_attributes()["unix"] == 1690328596

    def test_with_schedule_keeps_base(self) -> None:
        entity = RotatingEntity.create(BASE, build_schedule(days=7), {"v": "1"})
        updated = entity.with_schedule(build_schedule(hours=1))
        assert updated.base_instant == BASE
        assert updated.triggers == {"v": "1"}
        assert updated.deadline == datetime(2023, 7, 26, 0, 43, 16, tzinfo=UTC)

    def test_to_attributes(self) -> None:
        attrs = RotatingEntity.create(BASE, build_schedule(days=7)).to_attributes()
        assert attrs["id"] == "2023-07-25T23:43:16Z,,,7,,"
        assert attrs["rfc3339"] == "2023-07-25T23:43:16Z"
        assert attrs["rotation_rfc3339"] == "2023-08-01T23:43:16Z"
        assert attrs["rotation_days"] == 7
        assert attrs["rotation_years"] is None

    def test_json_round_trip(self) -> None:
        entity = RotatingEntity.create(BASE, build_schedule(rfc3339="2024-01-01T00:00:00Z"))
        assert RotatingEntity.model_validate_json(entity.model_dump_json()) == entity

    def test_frozen(self) -> None:
        entity = RotatingEntity.create(BASE, build_schedule(days=7))
        with pytest.raises(Exception):
            entity.deadline = BASE  # type: ignore[misc]


class TestStaticEntity:
    def test_to_attributes(self) -> None:
        attrs = StaticEntity(base_instant=BASE, triggers={"k": "v"}).to_attributes()
        assert attrs["id"] == attrs["rfc3339"] == "2023-07-25T23:43:16Z"
        assert attrs["triggers"] == {"k": "v"}
        assert attrs["second"] == 16


class TestOffsetEntity:
    def test_units_accumulate(self) -> None:
        start = datetime(2023, 1, 31, tzinfo=UTC)
        entity = OffsetEntity.create(start, OffsetSpec(months=1, days=1))
        assert entity.offset_instant == datetime(2023, 3, 1, tzinfo=UTC)

    def test_negative_offset(self) -> None:
        assert apply_offset(BASE, OffsetSpec(hours=-24)) == datetime(
            2023, 7, 24, 23, 43, 16, tzinfo=UTC
        )

    def test_derived_fields_describe_offset_instant(self) -> None:
        attrs = OffsetEntity.create(BASE, OffsetSpec(years=1)).to_attributes()
        assert attrs["base_rfc3339"] == "2023-07-25T23:43:16Z"
        assert attrs["rfc3339"] == "2024-07-25T23:43:16Z"
        assert attrs["year"] == 2024
        assert attrs["offset_years"] == 1
        assert attrs["offset_seconds"] is None

    def test_requires_one_unit(self) -> None:
        with pytest.raises(MalformedSchedule):
            OffsetSpec()

    def test_units_skip_absent(self) -> None:
        assert OffsetSpec(days=0, hours=2).units() == {"days": 0, "hours": 2}

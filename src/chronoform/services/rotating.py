"""RotatingService — timestamps that expire on a schedule.

Change rules:
- Base instant or triggers changed: replace (new entity).
- Schedule changed semantically: update in place, deadline recomputed
  from the stored base instant.
- Otherwise: no-op; the stored deadline is preserved.

An entity past its deadline is removed on the next read and created
afresh by the next apply.
"""

from __future__ import annotations

from datetime import datetime

from chronoform.domain.entity import RotatingEntity
from chronoform.domain.ids import decode_rotating
from chronoform.domain.plan import PlanAction, PlannedResource, preview_rotating
from chronoform.domain.schedule import needs_recompute
from chronoform.services.contracts import RotatingArgs
from chronoform.services.resource import ResourceService


class RotatingService(ResourceService):
    """Lifecycle of ``rotating`` resources."""

    resource_type = "rotating"
    entity_model = RotatingEntity

    def _deadline(self, entity: RotatingEntity) -> datetime:
        return entity.deadline

    def _decode(self, identifier: str) -> RotatingEntity:
        return decode_rotating(identifier)

    def _plan(self, args: RotatingArgs, stored: RotatingEntity | None) -> PlannedResource:
        schedule = args.schedule()
        base = args.base_instant()
        if stored is None:
            return PlannedResource(
                PlanAction.CREATE, preview_rotating(base, schedule, args.triggers)
            )

        reasons = self._replace_reasons(base, args.triggers, stored)
        if reasons:
            return PlannedResource(
                PlanAction.REPLACE,
                preview_rotating(base, schedule, args.triggers),
                reasons,
            )
        if needs_recompute(stored.schedule, schedule):
            return PlannedResource(
                PlanAction.UPDATE, stored.with_schedule(schedule).to_attributes()
            )
        return PlannedResource(PlanAction.NOOP, stored.to_attributes())

    def _commit(
        self,
        args: RotatingArgs,
        stored: RotatingEntity | None,
        action: PlanAction,
        now: datetime,
    ) -> RotatingEntity:
        schedule = args.schedule()
        if action in (PlanAction.CREATE, PlanAction.REPLACE):
            return RotatingEntity.create(args.base_instant() or now, schedule, dict(args.triggers))
        assert stored is not None
        if action is PlanAction.UPDATE:
            return stored.with_schedule(schedule)
        return stored

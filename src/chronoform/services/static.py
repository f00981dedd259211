"""StaticService — a timestamp captured once and kept until replaced."""

from __future__ import annotations

from datetime import datetime

from chronoform.domain.entity import StaticEntity
from chronoform.domain.ids import decode_static
from chronoform.domain.plan import PlanAction, PlannedResource, preview_static
from chronoform.services.contracts import StaticArgs
from chronoform.services.resource import ResourceService


class StaticService(ResourceService):
    """Lifecycle of ``static`` resources. Every change is a replacement."""

    resource_type = "static"
    entity_model = StaticEntity

    def _decode(self, identifier: str) -> StaticEntity:
        return decode_static(identifier)

    def _plan(self, args: StaticArgs, stored: StaticEntity | None) -> PlannedResource:
        base = args.base_instant()
        if stored is None:
            return PlannedResource(PlanAction.CREATE, preview_static(base, args.triggers))
        reasons = self._replace_reasons(base, args.triggers, stored)
        if reasons:
            return PlannedResource(
                PlanAction.REPLACE, preview_static(base, args.triggers), reasons
            )
        return PlannedResource(PlanAction.NOOP, stored.to_attributes())

    def _commit(
        self,
        args: StaticArgs,
        stored: StaticEntity | None,
        action: PlanAction,
        now: datetime,
    ) -> StaticEntity:
        if action is PlanAction.NOOP:
            assert stored is not None
            return stored
        return StaticEntity(base_instant=args.base_instant() or now, triggers=dict(args.triggers))

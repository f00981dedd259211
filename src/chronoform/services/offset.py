"""OffsetService — a base timestamp shifted by a multi-unit offset.

Changing the offsets recomputes in place from the stored base; changing
the base or the triggers replaces the resource.
"""

from __future__ import annotations

from datetime import datetime

from chronoform.domain.entity import OffsetEntity
from chronoform.domain.ids import decode_offset
from chronoform.domain.plan import PlanAction, PlannedResource, preview_offset
from chronoform.services.contracts import OffsetArgs
from chronoform.services.resource import ResourceService


class OffsetService(ResourceService):
    """Lifecycle of ``offset`` resources."""

    resource_type = "offset"
    entity_model = OffsetEntity
    base_field = "base_rfc3339"

    def _decode(self, identifier: str) -> OffsetEntity:
        return decode_offset(identifier)

    def _plan(self, args: OffsetArgs, stored: OffsetEntity | None) -> PlannedResource:
        offset = args.offset()
        base = args.base_instant()
        if stored is None:
            return PlannedResource(PlanAction.CREATE, preview_offset(base, offset, args.triggers))

        reasons = self._replace_reasons(base, args.triggers, stored)
        if reasons:
            return PlannedResource(
                PlanAction.REPLACE, preview_offset(base, offset, args.triggers), reasons
            )
        if stored.offset != offset:
            updated = OffsetEntity.create(stored.base_instant, offset, dict(stored.triggers))
            return PlannedResource(PlanAction.UPDATE, updated.to_attributes())
        return PlannedResource(PlanAction.NOOP, stored.to_attributes())

    def _commit(
        self,
        args: OffsetArgs,
        stored: OffsetEntity | None,
        action: PlanAction,
        now: datetime,
    ) -> OffsetEntity:
        offset = args.offset()
        if action in (PlanAction.CREATE, PlanAction.REPLACE):
            return OffsetEntity.create(args.base_instant() or now, offset, dict(args.triggers))
        assert stored is not None
        if action is PlanAction.UPDATE:
            return OffsetEntity.create(stored.base_instant, offset, dict(stored.triggers))
        return stored

"""StateService — read-only listing of everything in state."""

from __future__ import annotations

from typing import Any

from chronoform.domain.expiry import RotationState, evaluate_state
from chronoform.domain.timestamps import format_rfc3339, parse_rfc3339
from chronoform.services.base import BaseService
from chronoform.services.result import ServiceResult

RESOURCE_TYPES = ("rotating", "static", "offset")


class StateService(BaseService):
    """Inspects stored resources without refreshing them."""

    def list_resources(self, resource_type: str | None = None) -> ServiceResult:
        """List stored resources, flagging rotating ones that are past their deadline.

        Listing never removes anything; expired entries are dropped by the
        next ``show`` or ``apply`` of that address.
        """
        op = "list_resources"
        now = self._workspace.clock.now()
        with self._workspace.transaction() as txn:
            rows = txn.list_resources(resource_type)

        items: list[dict[str, Any]] = []
        for row in rows:
            deadline = row.attributes.get("rotation_rfc3339")
            state = (
                evaluate_state(parse_rfc3339(deadline), now) if deadline else RotationState.ACTIVE
            )
            items.append(
                {
                    "address": row.address,
                    "resource_type": row.resource_type,
                    "id": row.attributes.get("id"),
                    "rfc3339": row.attributes.get("rfc3339"),
                    "state": str(state),
                    "modified": row.modified,
                }
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": items},
            meta={"now": format_rfc3339(now)},
        )

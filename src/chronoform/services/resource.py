"""ResourceService — the plan/apply/show/import/delete lifecycle.

Pipeline for apply: REFRESH → PLAN → COMMIT → VERIFY → PERSIST → DISPATCH

- REFRESH drops an expired entity from state (the clock is read once).
- PLAN decides create / update / replace / no-op against what is left.
- COMMIT computes concrete values; VERIFY holds them against the plan.
- DISPATCH runs plugin hooks only after the transaction has committed.

Subclasses supply the per-type rules through ``_plan``, ``_commit``,
``_decode`` and ``_deadline``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel

from chronoform.domain.errors import AddressConflict, ChronoformError, InconsistentPlan
from chronoform.domain.expiry import RotationState, is_expired
from chronoform.domain.plan import PlanAction, PlannedResource, verify_commit
from chronoform.domain.timestamps import format_rfc3339
from chronoform.services.base import BaseService
from chronoform.services.result import ServiceResult

if TYPE_CHECKING:
    from chronoform.infrastructure.workspace import StateTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Refreshed:
    """Outcome of reading one address: the live entity, or the one that expired."""

    entity: Any | None = None
    expired: Any | None = None


class ResourceService(BaseService):
    """Shared lifecycle for one resource type."""

    resource_type: ClassVar[str]
    entity_model: ClassVar[type[BaseModel]]
    base_field: ClassVar[str] = "rfc3339"

    # ------------------------------------------------------------------
    # Per-type rules
    # ------------------------------------------------------------------

    def _plan(self, args: Any, stored: Any | None) -> PlannedResource:
        raise NotImplementedError

    def _commit(self, args: Any, stored: Any | None, action: PlanAction, now: datetime) -> Any:
        raise NotImplementedError

    def _decode(self, identifier: str) -> Any:
        raise NotImplementedError

    def _deadline(self, entity: Any) -> datetime | None:
        """Instant after which *entity* is gone. ``None`` means it never expires."""
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def plan(self, address: str, args: Any) -> ServiceResult:
        """Preview what :meth:`apply` would do. Never writes state."""
        op = f"plan_{self.resource_type}"
        try:
            with self._workspace.transaction() as txn:
                now = self._workspace.clock.now()
                refreshed = self._refresh(txn, address, now, persist=False)
                planned = self._plan(args, refreshed.entity)
        except ChronoformError as exc:
            return self._failure(op, exc)

        data = {"address": address, "resource_type": self.resource_type, **planned.to_dict()}
        if refreshed.expired is not None:
            data["expired"] = True
        return ServiceResult(ok=True, op=op, data=data, meta={"now": format_rfc3339(now)})

    def apply(
        self,
        address: str,
        args: Any,
        *,
        saved_plan: PlannedResource | None = None,
    ) -> ServiceResult:
        """Create, update or replace the resource at *address*.

        With *saved_plan*, the committed values are held against that
        earlier preview instead of a fresh one; any divergence fails the
        whole apply with ``INCONSISTENT_PLAN`` and leaves state untouched.
        """
        op = f"apply_{self.resource_type}"
        warnings: list[str] = []
        try:
            with self._workspace.transaction() as txn:
                now = self._workspace.clock.now()
                refreshed = self._refresh(txn, address, now, persist=True)
                current = self._plan(args, refreshed.entity)
                if saved_plan is not None and saved_plan.action != current.action:
                    raise InconsistentPlan("action", str(saved_plan.action), str(current.action))
                planned = saved_plan or current

                entity = self._commit(args, refreshed.entity, current.action, now)
                committed = entity.to_attributes()
                verify_commit(planned.attributes, committed)

                if current.action is not PlanAction.NOOP:
                    txn.put(address, self.resource_type, entity, committed)
        except ChronoformError as exc:
            return self._failure(op, exc)

        action = current.action
        logger.debug("%s %s: %s", op, address, action)
        if refreshed.expired is not None:
            self._dispatch_expire(address, refreshed.expired, warnings)
        if action is PlanAction.REPLACE:
            self._dispatch_event(
                "post_delete",
                {"resource_type": self.resource_type, "address": address},
                warnings,
            )
        if action in (PlanAction.CREATE, PlanAction.REPLACE):
            self._dispatch_event(
                "post_create",
                {
                    "resource_type": self.resource_type,
                    "address": address,
                    "attributes": committed,
                },
                warnings,
            )
        elif action is PlanAction.UPDATE:
            previous = refreshed.entity.to_attributes()
            self._dispatch_event(
                "post_update",
                {
                    "resource_type": self.resource_type,
                    "address": address,
                    "fields_changed": _changed_fields(previous, committed),
                    "attributes": committed,
                },
                warnings,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": address,
                "resource_type": self.resource_type,
                "action": str(action),
                "attributes": committed,
            },
            warnings=warnings,
            meta={"now": format_rfc3339(now)},
        )

    def show(self, address: str) -> ServiceResult:
        """Read the resource at *address*, removing it if it has expired."""
        op = f"show_{self.resource_type}"
        warnings: list[str] = []
        try:
            with self._workspace.transaction() as txn:
                now = self._workspace.clock.now()
                refreshed = self._refresh(txn, address, now, persist=True)
        except ChronoformError as exc:
            return self._failure(op, exc)

        if refreshed.expired is not None:
            self._dispatch_expire(address, refreshed.expired, warnings)
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "address": address,
                    "resource_type": self.resource_type,
                    "state": str(RotationState.EXPIRED),
                    "removed": True,
                    "attributes": refreshed.expired.to_attributes(),
                },
                warnings=warnings,
                meta={"now": format_rfc3339(now)},
            )
        if refreshed.entity is None:
            return self._not_found(op, address)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": address,
                "resource_type": self.resource_type,
                "state": str(RotationState.ACTIVE),
                "removed": False,
                "attributes": refreshed.entity.to_attributes(),
            },
            meta={"now": format_rfc3339(now)},
        )

    def import_state(self, address: str, identifier: str) -> ServiceResult:
        """Bring an existing value under management from its identifier."""
        op = f"import_{self.resource_type}"
        warnings: list[str] = []
        try:
            entity = self._decode(identifier)
            attributes = entity.to_attributes()
            with self._workspace.transaction() as txn:
                if txn.get(address) is not None:
                    raise AddressConflict(
                        f"Resource already managed at address: {address}", address=address
                    )
                txn.put(address, self.resource_type, entity, attributes)
        except ChronoformError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_import",
            {
                "resource_type": self.resource_type,
                "address": address,
                "identifier": identifier,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": address,
                "resource_type": self.resource_type,
                "attributes": attributes,
            },
            warnings=warnings,
        )

    def delete(self, address: str) -> ServiceResult:
        """Remove the resource at *address* from state."""
        op = f"delete_{self.resource_type}"
        warnings: list[str] = []
        try:
            with self._workspace.transaction() as txn:
                entity = self._load(txn, address)
                if entity is not None:
                    txn.remove(address)
        except ChronoformError as exc:
            return self._failure(op, exc)
        if entity is None:
            return self._not_found(op, address)

        self._dispatch_event(
            "post_delete",
            {"resource_type": self.resource_type, "address": address},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"address": address, "resource_type": self.resource_type, "deleted": True},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, txn: StateTransaction, address: str) -> Any | None:
        stored = txn.get(address)
        if stored is None:
            return None
        if stored.resource_type != self.resource_type:
            raise AddressConflict(
                f"Address {address} holds a {stored.resource_type} resource, "
                f"not {self.resource_type}",
                address=address,
                resource_type=stored.resource_type,
            )
        return self.entity_model.model_validate(stored.entity)

    def _refresh(
        self,
        txn: StateTransaction,
        address: str,
        now: datetime,
        *,
        persist: bool,
    ) -> Refreshed:
        entity = self._load(txn, address)
        if entity is None:
            return Refreshed()
        deadline = self._deadline(entity)
        if deadline is None or not is_expired(deadline, now):
            return Refreshed(entity=entity)
        logger.info(
            "%s expired at %s (now %s)",
            address,
            format_rfc3339(deadline),
            format_rfc3339(now),
        )
        if persist:
            txn.remove(address)
        return Refreshed(expired=entity)

    def _dispatch_expire(self, address: str, entity: Any, warnings: list[str]) -> None:
        deadline = self._deadline(entity)
        self._dispatch_event(
            "post_expire",
            {
                "resource_type": self.resource_type,
                "address": address,
                "deadline": format_rfc3339(deadline) if deadline else "",
            },
            warnings,
        )

    def _replace_reasons(
        self,
        base_instant: datetime | None,
        triggers: dict[str, str],
        stored: Any,
    ) -> list[str]:
        """Inputs whose change forces a new entity instead of an in-place update."""
        reasons: list[str] = []
        if base_instant is not None and base_instant != stored.base_instant:
            reasons.append(self.base_field)
        if dict(triggers) != dict(stored.triggers):
            reasons.append("triggers")
        return reasons


def _changed_fields(before: dict[str, Any], after: dict[str, Any]) -> list[str]:
    return sorted(key for key in after if before.get(key) != after.get(key))

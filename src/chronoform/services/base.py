"""BaseService — foundation for all chronoform services.

Every service receives a :class:`Workspace` at construction time. Services
own their transaction boundaries via ``self._workspace.transaction()`` and
dispatch plugin hooks only after the transaction has committed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chronoform.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from chronoform.domain.errors import ChronoformError
    from chronoform.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class RotatingService(ResourceService):
            def show(self, address: str) -> ServiceResult:
                with self._workspace.transaction() as txn:
                    ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call *hook_name* on every registered plugin. No-op without plugins.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._workspace.plugin_manager
        if pm is None:
            return
        try:
            getattr(pm.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook failed for {hook_name}")

    @staticmethod
    def _failure(
        op: str,
        exc: ChronoformError,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        logger.debug("%s failed: %s", op, exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            warnings=warnings or [],
        )

    @staticmethod
    def _not_found(op: str, address: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="NOT_FOUND",
                message=f"No resource in state at address: {address}",
                detail={"address": address},
            ),
        )

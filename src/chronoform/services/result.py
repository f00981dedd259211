"""ServiceResult and ServiceError — what every service call returns.

INVARIANT: service methods never raise engine errors to their caller.
A :class:`~chronoform.domain.errors.ChronoformError` is turned into a
failed result carrying its stable code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from chronoform.domain.errors import ChronoformError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ChronoformError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"apply"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues, such as a failing plugin hook.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (resource type, clock reading).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

"""Expiry evaluation for rotating entities.

Two states per entity instance:
- ACTIVE: ``now <= deadline``.
- EXPIRED: ``now > deadline``. One-way; the entity is removed from state
  and a fresh one is created on the next apply.

Comparison is strict and always between absolute instants.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from chronoform.domain.timestamps import ensure_utc


class RotationState(StrEnum):
    """Lifecycle state of a rotating entity."""

    ACTIVE = "active"
    EXPIRED = "expired"


def is_expired(deadline: datetime, now: datetime) -> bool:
    """Return True when *now* is strictly after *deadline*."""
    return ensure_utc(now) > ensure_utc(deadline)


def evaluate_state(deadline: datetime, now: datetime) -> RotationState:
    """Classify an entity with *deadline* at instant *now*."""
    if is_expired(deadline, now):
        return RotationState.EXPIRED
    return RotationState.ACTIVE
"""Engine error kinds.

Every engine failure is a :class:`ChronoformError` carrying a stable
``code``. Services translate these into ``ServiceError`` payloads; the
engine itself never retries and never reconciles.
"""

from __future__ import annotations

from typing import Any


class ChronoformError(Exception):
    """Base class for all engine errors."""

    code = "CHRONOFORM_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class MalformedTimestamp(ChronoformError):
    """A string could not be parsed as an RFC 3339 timestamp."""

    code = "MALFORMED_TIMESTAMP"


class MalformedSchedule(ChronoformError):
    """Explicit deadline is not a timestamp, or a unit count is not positive."""

    code = "MALFORMED_SCHEDULE"


class AmbiguousSchedule(ChronoformError):
    """More than one schedule variant was supplied."""

    code = "AMBIGUOUS_SCHEDULE"


class MissingSchedule(ChronoformError):
    """No schedule variant was supplied."""

    code = "MISSING_SCHEDULE"


class MalformedIdentifier(ChronoformError):
    """An import identifier failed positional validation."""

    code = "MALFORMED_IDENTIFIER"


class InconsistentPlan(ChronoformError):
    """A concrete value predicted during preview differs from the committed one.

    Always fatal. Surfaced to the caller as-is.
    """

    code = "INCONSISTENT_PLAN"

    def __init__(self, field: str, planned: Any, committed: Any) -> None:
        super().__init__(
            f"Provider produced inconsistent result after apply: "
            f"{field} was planned as {planned!r} but is now {committed!r}",
            field=field,
            planned=str(planned),
            committed=str(committed),
        )
        self.field = field


class MalformedDuration(ChronoformError):
    """A duration string is not in ``300ms`` / ``-1.5h`` / ``2h45m`` form."""

    code = "MALFORMED_DURATION"


class AddressConflict(ChronoformError):
    """The state address already holds a resource that cannot be used here."""

    code = "ADDRESS_CONFLICT"

"""Provider functions exposed as service calls.

These need neither state nor a clock, so they take no workspace.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from chronoform.domain.errors import ChronoformError
from chronoform.domain.functions import duration_parse, rfc3339_parse, unix_timestamp_parse
from chronoform.services.result import ServiceError, ServiceResult

FUNCTIONS: dict[str, Callable[[Any], dict[str, Any]]] = {
    "rfc3339_parse": rfc3339_parse,
    "unix_timestamp_parse": unix_timestamp_parse,
    "duration_parse": duration_parse,
}


def call_function(name: str, argument: Any) -> ServiceResult:
    """Run the function registered as *name* on *argument*."""
    func = FUNCTIONS.get(name)
    if func is None:
        return ServiceResult(
            ok=False,
            op=name,
            error=ServiceError(
                code="UNKNOWN_FUNCTION",
                message=f"Unknown function: {name}",
                detail={"available": sorted(FUNCTIONS)},
            ),
        )
    try:
        data = func(argument)
    except ChronoformError as exc:
        return ServiceResult(ok=False, op=name, error=ServiceError.from_exception(exc))
    return ServiceResult(ok=True, op=name, data={"input": argument, **data})

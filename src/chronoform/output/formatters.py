"""Rich/JSON output selection.

The CLI renders a ServiceResult for humans (Rich tables and colors) or
machines (``--json``). Unknown plan values are already rendered as
``(known after apply)`` by the service layer, so both modes show them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chronoform.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from chronoform.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return the full result as indented JSON.
        quiet: Return only ids/addresses (ignored with ``json_output``).
        verbose: Include error detail and result metadata.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    if quiet:
        return render_quiet(result)
    return render_result(result, verbose=verbose)

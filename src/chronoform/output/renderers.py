"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from chronoform.domain.plan import UNKNOWN_DISPLAY
from chronoform.output.console import (
    ACTION_SYMBOLS,
    create_console,
    get_output,
    style_for_action,
    style_for_state,
)
from chronoform.services.state import RESOURCE_TYPES

if TYPE_CHECKING:
    from rich.console import Console

    from chronoform.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: ids for listings, else the status."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("address", "")) for item in items)
    attributes = result.data.get("attributes")
    if isinstance(attributes, dict) and attributes.get("id") not in (None, UNKNOWN_DISPLAY):
        return str(attributes["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _value_text(key: str, value: Any) -> Text:
    if value == UNKNOWN_DISPLAY:
        return Text(UNKNOWN_DISPLAY, style="chrono.unknown")
    if value is None:
        return Text("null", style="dim")
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, separators=(",", ":"), sort_keys=True))
    if key == "rfc3339" or key.endswith("_rfc3339"):
        return Text(str(value), style="chrono.timestamp")
    return Text(str(value))


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="chrono.ok") + Text(f"  {result.op}", style="chrono.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="chrono.key")
    v = Text(str(value), style="chrono.address") if key == "address" else _value_text(key, value)
    console.print(k + v)


def _action_line(console: Console, action: str) -> None:
    label = Text(f"{ACTION_SYMBOLS.get(action, '?')} {action}", style_for_action(action))
    console.print(Text("  action: ", style="chrono.key") + label)


def _attribute_table(attributes: dict[str, Any], unknown: list[str] | None = None) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Attribute", style="chrono.key", no_wrap=True)
    table.add_column("Value")
    for key, value in attributes.items():
        shown = UNKNOWN_DISPLAY if unknown and key in unknown else value
        table.add_row(Text(key), _value_text(key, shown))
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="chrono.error")
        + Text(f"  {result.op}", style="chrono.op")
        + Text(f"{code} - {msg}")
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Resource renderers ────────────────────────────────────────────────


def _render_plan(result: ServiceResult, console: Console) -> None:
    d = result.data
    action = str(d.get("action", ""))
    _status_line(console, result)
    _field(console, "address", d.get("address", ""))
    _action_line(console, action)
    if d.get("expired"):
        console.print(Text("  stored entity expired; it will be created again", "chrono.warning"))
    reasons = d.get("replace_reasons") or []
    if reasons:
        _field(console, "forces replacement", ", ".join(reasons))
    console.print(_attribute_table(d.get("attributes", {}), d.get("unknown")))


def _render_apply(result: ServiceResult, console: Console) -> None:
    d = result.data
    action = str(d.get("action", ""))
    _status_line(console, result)
    _field(console, "address", d.get("address", ""))
    _action_line(console, action)
    console.print(_attribute_table(d.get("attributes", {})))


def _render_show(result: ServiceResult, console: Console) -> None:
    d = result.data
    state = str(d.get("state", ""))
    _status_line(console, result)
    _field(console, "address", d.get("address", ""))
    console.print(Text("  state: ", style="chrono.key") + Text(state, style_for_state(state)))
    if d.get("removed"):
        console.print(Text("  removed from state; the next apply creates it again", "dim"))
    console.print(_attribute_table(d.get("attributes", {})))


def _render_import(result: ServiceResult, console: Console) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "address", d.get("address", ""))
    console.print(_attribute_table(d.get("attributes", {})))


def _render_delete(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "address", result.data.get("address", ""))


def _render_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Address", style="chrono.address", no_wrap=True)
    table.add_column("Type")
    table.add_column("ID")
    table.add_column("RFC3339", style="chrono.timestamp")
    table.add_column("State")
    for item in items:
        state = str(item.get("state", ""))
        table.add_row(
            Text(str(item.get("address", ""))),
            Text(str(item.get("resource_type", ""))),
            Text(str(item.get("id", ""))),
            Text(str(item.get("rfc3339", ""))),
            Text(state, style=style_for_state(state)),
        )
    console.print(table)
    console.print(Text(f"\n{result.data.get('count', len(items))} resources"))


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    "list_resources": _render_list,
    **{f"plan_{rt}": _render_plan for rt in RESOURCE_TYPES},
    **{f"apply_{rt}": _render_apply for rt in RESOURCE_TYPES},
    **{f"show_{rt}": _render_show for rt in RESOURCE_TYPES},
    **{f"import_{rt}": _render_import for rt in RESOURCE_TYPES},
    **{f"delete_{rt}": _render_delete for rt in RESOURCE_TYPES},
}

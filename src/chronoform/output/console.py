"""Rich Console factory and theme for chronoform output.

Consoles render into a StringIO buffer so every renderer returns a plain
string. Outside a terminal (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CHRONO_THEME = Theme(
    {
        "chrono.ok": "bold green",
        "chrono.error": "bold red",
        "chrono.warning": "bold yellow",
        "chrono.op": "bold cyan",
        "chrono.key": "dim",
        "chrono.address": "bold blue",
        "chrono.timestamp": "magenta",
        "chrono.unknown": "dim italic",
        "chrono.action.create": "green",
        "chrono.action.update": "yellow",
        "chrono.action.replace": "bold red",
        "chrono.action.no-op": "dim",
        "chrono.state.active": "green",
        "chrono.state.expired": "bold yellow",
    }
)

ACTION_SYMBOLS: dict[str, str] = {
    "create": "+",
    "update": "~",
    "replace": "-/+",
    "no-op": "=",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps table layout stable in tests).
    """
    return Console(
        file=StringIO(),
        theme=CHRONO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_action(action: str) -> str:
    return f"chrono.action.{action}" if action in ACTION_SYMBOLS else ""


def style_for_state(state: str) -> str:
    return f"chrono.state.{state}" if state in ("active", "expired") else ""

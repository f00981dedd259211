"""Command group: pure parse functions (no state access)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoform.commands._options import with_examples
from chronoform.services.functions import call_function

if TYPE_CHECKING:
    from chronoform.commands._context import AppContext


@click.group(invoke_without_command=True)
@with_examples(
    """\
  chronoform fn rfc3339-parse 2023-07-25T23:43:16Z
  chronoform fn unix-parse 1690328596
  chronoform --json fn duration-parse 2h45m"""
)
@click.pass_context
def fn(ctx: click.Context) -> None:
    """Parse timestamps and durations."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@fn.command("rfc3339-parse")
@click.argument("timestamp")
@click.pass_obj
def rfc3339_parse(app: AppContext, timestamp: str) -> None:
    """Break an RFC 3339 TIMESTAMP into calendar fields."""
    app.emit(call_function("rfc3339_parse", timestamp))


@fn.command("unix-parse")
@click.argument("seconds", type=int)
@click.pass_obj
def unix_parse(app: AppContext, seconds: int) -> None:
    """Break a Unix timestamp in SECONDS into calendar fields."""
    app.emit(call_function("unix_timestamp_parse", seconds))


@fn.command("duration-parse")
@click.argument("duration")
@click.pass_obj
def duration_parse(app: AppContext, duration: str) -> None:
    """Express DURATION (e.g. 300ms, -1.5h, 2h45m) in every unit."""
    app.emit(call_function("duration_parse", duration))

"""Command group: offset timestamps."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from chronoform.commands._options import address_argument, trigger_option, with_examples
from chronoform.commands._resource import (
    add_lifecycle_commands,
    plan_out_option,
    run_apply,
    run_plan,
    saved_plan_option,
)
from chronoform.domain.ids import OFFSET_FORMAT
from chronoform.domain.offset import OFFSET_UNITS
from chronoform.services.contracts import OffsetArgs
from chronoform.services.offset import OffsetService

if TYPE_CHECKING:
    from collections.abc import Callable

    from chronoform.commands._context import AppContext


def offset_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by ``plan`` and ``apply``; offsets may be negative."""
    options = [
        click.option("--base-rfc3339", default=None, help="Base timestamp (default: now)."),
        *(
            click.option(f"--offset-{unit}", type=int, default=None, help=f"Shift by N {unit}.")
            for unit in OFFSET_UNITS
        ),
        trigger_option,
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@with_examples(
    """\
  chronoform offset apply trial-end --offset-days 14
  chronoform offset apply window --base-rfc3339 2023-07-25T00:00:00Z --offset-hours -6
  chronoform offset import window 2023-07-25T00:00:00Z,,,,-6,,"""
)
@click.pass_context
def offset(ctx: click.Context) -> None:
    """A base timestamp shifted by years, months, days, hours, minutes or seconds."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@offset.command()
@with_examples("  chronoform offset plan trial-end --offset-months 1 --offset-days 1")
@address_argument
@offset_options
@plan_out_option
@click.pass_obj
def plan(app: AppContext, address: str, out_path: Path | None, **kwargs: Any) -> None:
    """Preview what apply would do to ADDRESS."""
    run_plan(app, OffsetService(app.workspace), address, OffsetArgs(**kwargs), out_path)


@offset.command()
@with_examples(
    """\
  chronoform offset apply trial-end --offset-days 14
  chronoform offset apply --plan trial-end.plan"""
)
@click.argument("address", required=False)
@offset_options
@saved_plan_option
@click.pass_obj
def apply(app: AppContext, address: str | None, plan_path: Path | None, **kwargs: Any) -> None:
    """Create, update or replace the offset timestamp at ADDRESS."""
    run_apply(app, OffsetService(app.workspace), address, OffsetArgs(**kwargs), plan_path)


add_lifecycle_commands(offset, OffsetService, OFFSET_FORMAT, "2023-07-25T00:00:00Z,,,,-6,,")

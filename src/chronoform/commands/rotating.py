"""Command group: rotating timestamps."""

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
from chronoform.domain.ids import ROTATING_FORMATS
from chronoform.services.contracts import RotatingArgs
from chronoform.services.rotating import RotatingService

if TYPE_CHECKING:
    from collections.abc import Callable

    from chronoform.commands._context import AppContext


def rotating_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by ``plan`` and ``apply``."""
    options = [
        click.option("--rfc3339", default=None, help="Base timestamp (default: now at apply)."),
        click.option("--rotation-years", type=int, default=None, help="Rotate after N years."),
        click.option("--rotation-months", type=int, default=None, help="Rotate after N months."),
        click.option("--rotation-days", type=int, default=None, help="Rotate after N days."),
        click.option("--rotation-hours", type=int, default=None, help="Rotate after N hours."),
        click.option(
            "--rotation-minutes", type=int, default=None, help="Rotate after N minutes."
        ),
        click.option("--rotation-rfc3339", default=None, help="Rotate at this timestamp."),
        trigger_option,
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@with_examples(
    """\
  chronoform rotating plan cert --rotation-days 30
  chronoform rotating apply cert --rotation-days 30
  chronoform rotating show cert
  chronoform rotating import cert 2023-07-25T00:00:00Z,,,7,,"""
)
@click.pass_context
def rotating(ctx: click.Context) -> None:
    """Timestamps that rotate after a calendar interval or at a fixed instant."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@rotating.command()
@with_examples(
    """\
  chronoform rotating plan cert --rotation-days 7
  chronoform rotating plan cert --rfc3339 2023-07-25T00:00:00Z --rotation-months 1
  chronoform rotating plan cert --rotation-rfc3339 2024-01-01T00:00:00Z --out cert.plan"""
)
@address_argument
@rotating_options
@plan_out_option
@click.pass_obj
def plan(app: AppContext, address: str, out_path: Path | None, **kwargs: Any) -> None:
    """Preview what apply would do to ADDRESS."""
    run_plan(app, RotatingService(app.workspace), address, RotatingArgs(**kwargs), out_path)


@rotating.command()
@with_examples(
    """\
  chronoform rotating apply cert --rotation-days 7
  chronoform rotating apply cert --rotation-days 7 --trigger version=2
  chronoform rotating apply --plan cert.plan"""
)
@click.argument("address", required=False)
@rotating_options
@saved_plan_option
@click.pass_obj
def apply(app: AppContext, address: str | None, plan_path: Path | None, **kwargs: Any) -> None:
    """Create, update or replace the rotating timestamp at ADDRESS."""
    run_apply(app, RotatingService(app.workspace), address, RotatingArgs(**kwargs), plan_path)


add_lifecycle_commands(
    rotating,
    RotatingService,
    ROTATING_FORMATS,
    "2023-07-25T00:00:00Z,,,7,,",
)

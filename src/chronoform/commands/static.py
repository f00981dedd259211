"""Command group: static timestamps."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from chronoform.commands._options import address_argument, trigger_option, with_examples
from chronoform.commands._resource import (
    add_lifecycle_commands,
    plan_out_option,
    run_apply,
    run_plan,
    saved_plan_option,
)
from chronoform.services.contracts import StaticArgs
from chronoform.services.static import StaticService

if TYPE_CHECKING:
    from chronoform.commands._context import AppContext

_rfc3339_option = click.option(
    "--rfc3339", default=None, help="Timestamp to keep (default: now at apply)."
)


@click.group(invoke_without_command=True)
@with_examples(
    """\
  chronoform static apply released --rfc3339 2023-07-25T12:00:00Z
  chronoform static apply built --trigger commit=abc123
  chronoform static show released"""
)
@click.pass_context
def static(ctx: click.Context) -> None:
    """Timestamps captured once and kept until replaced."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@static.command()
@with_examples("  chronoform static plan built --trigger commit=abc123 --out built.plan")
@address_argument
@_rfc3339_option
@trigger_option
@plan_out_option
@click.pass_obj
def plan(
    app: AppContext,
    address: str,
    rfc3339: str | None,
    triggers: dict[str, str],
    out_path: Path | None,
) -> None:
    """Preview what apply would do to ADDRESS."""
    args = StaticArgs(rfc3339=rfc3339, triggers=triggers)
    run_plan(app, StaticService(app.workspace), address, args, out_path)


@static.command()
@with_examples(
    """\
  chronoform static apply built --trigger commit=abc123
  chronoform static apply --plan built.plan"""
)
@click.argument("address", required=False)
@_rfc3339_option
@trigger_option
@saved_plan_option
@click.pass_obj
def apply(
    app: AppContext,
    address: str | None,
    rfc3339: str | None,
    triggers: dict[str, str],
    plan_path: Path | None,
) -> None:
    """Create or replace the static timestamp at ADDRESS."""
    args = StaticArgs(rfc3339=rfc3339, triggers=triggers)
    run_apply(app, StaticService(app.workspace), address, args, plan_path)


add_lifecycle_commands(static, StaticService, "BASETIMESTAMP", "2023-07-25T12:00:00Z")

"""Shared Click options and parameter types.

``with_examples`` adds an eager ``--examples`` flag that prints usage
examples and exits, so ``--help`` stays short.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def with_examples(examples: str) -> Callable[[F], F]:
    """Attach an eager ``--examples`` flag to a command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show_examples,
        help="Show usage examples.",
    )


def _parse_triggers(
    _ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    triggers: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param=param)
        triggers[key] = value
    return triggers


trigger_option = click.option(
    "--trigger",
    "triggers",
    multiple=True,
    callback=_parse_triggers,
    metavar="KEY=VALUE",
    help="Arbitrary value whose change forces replacement (repeatable).",
)

address_argument = click.argument("address")

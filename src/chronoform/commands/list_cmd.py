"""Command: list everything in state."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoform.commands._options import with_examples
from chronoform.services.state import RESOURCE_TYPES, StateService

if TYPE_CHECKING:
    from chronoform.commands._context import AppContext


@click.command("list")
@with_examples(
    """\
  chronoform list
  chronoform list --type rotating
  chronoform -q list"""
)
@click.option(
    "--type",
    "resource_type",
    type=click.Choice(RESOURCE_TYPES),
    default=None,
    help="Only list resources of this type.",
)
@click.pass_obj
def list_cmd(app: AppContext, resource_type: str | None) -> None:
    """List stored resources and whether rotating ones have expired."""
    app.emit(StateService(app.workspace).list_resources(resource_type))

"""Subcommand modules for chronoform.

Provides register_commands(), which imports each module only when the
root group is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the resource groups, the ``fn`` group and ``list``."""
    from chronoform.commands.fn import fn
    from chronoform.commands.list_cmd import list_cmd
    from chronoform.commands.offset import offset
    from chronoform.commands.rotating import rotating
    from chronoform.commands.static import static

    cli.add_command(rotating)
    cli.add_command(offset)
    cli.add_command(static)
    cli.add_command(fn)
    cli.add_command(list_cmd)

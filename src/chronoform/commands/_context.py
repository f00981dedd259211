"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the workspace lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoform.config.logging import configure_logging
from chronoform.output.formatters import format_result

if TYPE_CHECKING:
    from chronoform.config.settings import ChronoSettings
    from chronoform.infrastructure.workspace import Workspace
    from chronoform.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help``, ``--version`` and
    the ``fn`` commands never touch the state database.
    """

    def __init__(self, settings: ChronoSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily, plugins loaded)."""
        if self._workspace is None:
            from chronoform.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
            self._workspace.init_plugins()
        return self._workspace

    def close(self) -> None:
        if self._workspace is not None:
            self._workspace.close()
            self._workspace = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, normal return. Warnings go to stderr in
          human mode (they are part of the payload in JSON mode).
        * Failure: stderr, exit code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

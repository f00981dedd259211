"""Root CLI group for chronoform with global flags and command registration."""

from __future__ import annotations

import click

from chronoform import __version__
from chronoform.commands import register_commands
from chronoform.commands._context import AppContext
from chronoform.config.settings import ChronoSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="chronoform")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and metadata.")
@click.option("--log-json", is_flag=True, help="JSON log lines on stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--now",
    default=None,
    metavar="RFC3339",
    help="Pin the clock to this instant for the whole run.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    now: str | None,
) -> None:
    """chronoform — rotating, offset and static timestamps with plan/apply."""
    try:
        settings = ChronoSettings.from_cli(
            config_path=config_path,
            json_output=json_output or None,
            quiet=quiet or None,
            verbose=verbose or None,
            log_json=log_json or None,
            now=now,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

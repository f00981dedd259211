"""Commands shared by every resource group, and saved plan files.

A saved plan (``plan --out FILE``) records the address, the arguments and
the previewed attributes. ``apply --plan FILE`` replays those arguments and
holds the commit to the recorded preview; if state or time moved in
between, the apply fails with ``INCONSISTENT_PLAN`` instead of silently
doing something else.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pydantic import BaseModel, ValidationError

from chronoform.commands._options import address_argument, with_examples
from chronoform.domain.plan import PlannedResource

if TYPE_CHECKING:
    from chronoform.commands._context import AppContext
    from chronoform.services.resource import ResourceService
    from chronoform.services.result import ServiceResult

SAVED_PLAN_VERSION = 1

plan_out_option = click.option(
    "--out",
    "out_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save the plan to FILE for a later 'apply --plan FILE'.",
)

saved_plan_option = click.option(
    "--plan",
    "plan_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Apply a plan saved with 'plan --out'.",
)


class SavedPlan(BaseModel):
    """On-disk form of a plan."""

    version: int = SAVED_PLAN_VERSION
    address: str
    resource_type: str
    args: dict[str, Any]
    plan: dict[str, Any]

    def planned(self) -> PlannedResource:
        return PlannedResource.from_dict(self.plan)


def write_saved_plan(path: Path, result: ServiceResult, args: BaseModel) -> None:
    saved = SavedPlan(
        address=result.data["address"],
        resource_type=result.data["resource_type"],
        args=args.model_dump(),
        plan={
            key: result.data[key]
            for key in ("action", "attributes", "unknown", "replace_reasons")
        },
    )
    path.write_text(saved.model_dump_json(indent=2), encoding="utf-8")


def read_saved_plan(path: Path, resource_type: str) -> SavedPlan:
    try:
        saved = SavedPlan.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise click.ClickException(f"Invalid plan file {path}: {exc}") from exc
    if saved.version != SAVED_PLAN_VERSION:
        raise click.ClickException(f"Unsupported plan file version {saved.version} in {path}")
    if saved.resource_type != resource_type:
        raise click.ClickException(
            f"Plan file {path} is for a {saved.resource_type} resource, not {resource_type}"
        )
    return saved


def run_plan(
    app: AppContext,
    service: ResourceService,
    address: str,
    args: BaseModel,
    out_path: Path | None,
) -> None:
    result = service.plan(address, args)
    if out_path is not None and result.ok:
        write_saved_plan(out_path, result, args)
    app.emit(result)


def _flag_name(field: str) -> str:
    return "--trigger" if field == "triggers" else "--" + field.replace("_", "-")


def run_apply(
    app: AppContext,
    service: ResourceService,
    address: str | None,
    args: BaseModel,
    plan_path: Path | None,
) -> None:
    if plan_path is None:
        if address is None:
            raise click.UsageError("ADDRESS is required unless --plan is given")
        app.emit(service.apply(address, args))
        return

    given = [_flag_name(name) for name in args.model_dump(exclude_defaults=True)]
    if given:
        raise click.UsageError(
            f"--plan cannot be combined with {', '.join(given)}; "
            "the plan file carries the arguments"
        )
    saved = read_saved_plan(plan_path, service.resource_type)
    if address is not None and address != saved.address:
        raise click.UsageError(
            f"Plan file {plan_path} is for address {saved.address!r}, not {address!r}"
        )
    try:
        saved_args = type(args).model_validate(saved.args)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid arguments in plan file {plan_path}: {exc}") from exc
    app.emit(service.apply(saved.address, saved_args, saved_plan=saved.planned()))


def add_lifecycle_commands(
    group: click.Group,
    service_cls: type[ResourceService],
    identifier_format: str,
    sample_identifier: str,
) -> None:
    """Attach ``show``, ``import`` and ``delete`` to a resource group."""
    name = group.name

    @group.command("show")
    @with_examples(f"  chronoform {name} show main\n  chronoform --json {name} show main")
    @address_argument
    @click.pass_obj
    def show(app: AppContext, address: str) -> None:
        """Read a resource, removing it from state if it has expired."""
        app.emit(service_cls(app.workspace).show(address))

    @group.command("import")
    @with_examples(f"  chronoform {name} import main {sample_identifier}")
    @address_argument
    @click.argument("identifier")
    @click.pass_obj
    def import_cmd(app: AppContext, address: str, identifier: str) -> None:
        app.emit(service_cls(app.workspace).import_state(address, identifier))

    import_cmd.help = f"Import an existing value into state.\n\nIDENTIFIER: {identifier_format}"

    @group.command("delete")
    @with_examples(f"  chronoform {name} delete main")
    @address_argument
    @click.pass_obj
    def delete(app: AppContext, address: str) -> None:
        """Remove a resource from state."""
        app.emit(service_cls(app.workspace).delete(address))

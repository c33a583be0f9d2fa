"""Commands: show one asset, list all assets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import AvlCommand

if TYPE_CHECKING:
    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl show forklift-07
  availctl --json show forklift-07""",
)
@click.argument("asset_id")
@click.pass_obj
def show(app: AppContext, asset_id: str) -> None:
    """Show the current lock of an asset."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).show(asset_id))


@click.command(
    "list",
    cls=AvlCommand,
    examples="""\
  availctl list
  availctl list --state locked
  availctl -q list --state available""",
)
@click.option(
    "--state",
    type=click.Choice(["available", "maintenance", "withdrawn", "locked"]),
    default=None,
    help="Only assets in this state.",
)
@click.pass_obj
def list_cmd(app: AppContext, state: str | None) -> None:
    """List registered assets."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).list_assets(state=state))

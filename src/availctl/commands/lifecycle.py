"""Commands: activate and withdraw assets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import AvlCommand

if TYPE_CHECKING:
    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl activate forklift-07""",
)
@click.argument("asset_id")
@click.pass_obj
def activate(app: AppContext, asset_id: str) -> None:
    """Put an asset under maintenance into service."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).activate(asset_id))


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl withdraw forklift-07""",
)
@click.argument("asset_id")
@click.pass_obj
def withdraw(app: AppContext, asset_id: str) -> None:
    """Permanently remove an available or not-yet-active asset from service."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).withdraw(asset_id))

"""Command: register a new asset."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import AvlCommand

if TYPE_CHECKING:
    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl register forklift-07
  availctl --json register room-2.14""",
)
@click.argument("asset_id")
@click.pass_obj
def register(app: AppContext, asset_id: str) -> None:
    """Register an asset. New assets start under maintenance."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).register(asset_id))

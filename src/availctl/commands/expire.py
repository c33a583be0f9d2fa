"""Command: release overdue owner locks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import AvlCommand

if TYPE_CHECKING:
    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl expire
  availctl -q expire   # print only the released asset ids""",
)
@click.pass_obj
def expire(app: AppContext) -> None:
    """Release every owner lock whose expiry time has passed."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).expire_overdue())

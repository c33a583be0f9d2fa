"""Command: retry undelivered events."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import AvlCommand

if TYPE_CHECKING:
    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl drain
  availctl --json drain""",
)
@click.pass_obj
def drain(app: AppContext) -> None:
    """Retry delivery of pending and failed events."""
    from availctl.services.events import EventService

    app.emit(EventService(app.store).drain())

"""Commands: lock and unlock an asset for an owner."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.commands._base import DURATION, AvlCommand

if TYPE_CHECKING:
    from datetime import timedelta

    from availctl.commands._context import AppContext


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl lock forklift-07 tenant-42
  availctl lock forklift-07 tenant-42 --for 2h
  availctl lock forklift-07 tenant-42 --indefinitely""",
)
@click.argument("asset_id")
@click.argument("owner_id")
@click.option(
    "--for",
    "duration",
    type=DURATION,
    default=None,
    help="Lock duration such as 90m, 2h or 7d (default from config).",
)
@click.option(
    "--indefinitely",
    is_flag=True,
    help="Extend a lock the owner already holds to the indefinite period.",
)
@click.pass_obj
def lock(
    app: AppContext,
    asset_id: str,
    owner_id: str,
    duration: timedelta | None,
    indefinitely: bool,
) -> None:
    """Lock an asset for an owner."""
    from availctl.services.availability import AvailabilityService

    if indefinitely and duration is not None:
        raise click.UsageError("--for and --indefinitely are mutually exclusive.")

    service = AvailabilityService(app.store)
    if indefinitely:
        app.emit(service.lock_indefinitely(asset_id, owner_id))
    else:
        app.emit(service.lock(asset_id, owner_id, duration))


@click.command(
    cls=AvlCommand,
    examples="""\
  availctl unlock forklift-07 tenant-42""",
)
@click.argument("asset_id")
@click.argument("owner_id")
@click.pass_obj
def unlock(app: AppContext, asset_id: str, owner_id: str) -> None:
    """Release the lock an owner holds on an asset."""
    from availctl.services.availability import AvailabilityService

    app.emit(AvailabilityService(app.store).unlock(asset_id, owner_id))

"""Subcommand modules for availctl.

Provides register_commands() which uses deferred imports to keep
``availctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from availctl.commands.events import drain
    from availctl.commands.expire import expire
    from availctl.commands.lifecycle import activate, withdraw
    from availctl.commands.lock import lock, unlock
    from availctl.commands.query import list_cmd, show
    from availctl.commands.register import register

    cli.add_command(register)
    cli.add_command(show)
    cli.add_command(list_cmd)
    cli.add_command(activate)
    cli.add_command(withdraw)
    cli.add_command(lock)
    cli.add_command(unlock)
    cli.add_command(expire)
    cli.add_command(drain)

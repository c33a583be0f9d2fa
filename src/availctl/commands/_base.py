"""Custom Click base classes and parameter types.

AvlCommand accepts an ``examples`` parameter; ``--examples`` prints them and
exits, keeping ``--help`` concise.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class AvlCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([mhd])\s*$")
_DURATION_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


class DurationType(click.ParamType):
    """Parse ``90m``, ``2h`` or ``7d`` into a :class:`timedelta`."""

    name = "duration"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> timedelta:
        if isinstance(value, timedelta):
            return value
        match = _DURATION_RE.match(str(value))
        if match is None:
            self.fail(f"{value!r} is not a duration like 90m, 2h or 7d", param, ctx)
        amount, unit = match.groups()
        try:
            duration = timedelta(**{_DURATION_UNITS[unit]: int(amount)})
            # Must still yield a representable expiry.
            datetime.now(UTC) + duration
        except OverflowError:
            self.fail(f"{value!r} is too long a duration", param, ctx)
        return duration


DURATION = DurationType()

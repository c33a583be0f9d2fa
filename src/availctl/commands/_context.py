"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The store is opened lazily so ``--help`` and
``--version`` never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from availctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from availctl.config.settings import AvlSettings
    from availctl.infrastructure.store import AssetStore
    from availctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: AvlSettings) -> None:
        self.settings = settings
        self._store: AssetStore | None = None

        from availctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from availctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> AssetStore:
        """The asset store (opened lazily on first access)."""
        if self._store is None:
            from availctl.infrastructure.store import AssetStore

            self._store = AssetStore(self.settings)
            self._store.init_event_bus(sync=self.settings.sync)
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr in non-JSON modes.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

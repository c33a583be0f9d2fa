"""AssetStore — owns the database engine and the event bus.

The store is the single dependency injected into every service. Services
own their transaction boundaries via ``self._store.transaction()``; each
transaction is one ``engine.begin()`` block that commits on success and
rolls back on any exception (including a version conflict).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from availctl.infrastructure.database.engine import init_database

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from availctl.config.settings import AvlSettings

logger = logging.getLogger(__name__)


class AssetStore:
    """Database access plus lifecycle-event publication for one store root."""

    def __init__(self, settings: AvlSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.db_path)
        self._event_bus: Any | None = None
        logger.debug("Opened asset store at %s", settings.db_path)

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def settings(self) -> AvlSettings:
        return self._settings

    @property
    def event_bus(self) -> Any | None:
        """The plugin event bus (None if not initialized or disabled)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Discover plugins and wire up the event bus.

        Registers the built-in journal plugin, which appends every published
        event to ``events.jsonl`` inside the store directory.
        """
        if not self._settings.events.enabled:
            return

        from availctl.plugins.builtins.journal import JournalPlugin
        from availctl.plugins.event_bus import EventBus
        from availctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        pm.register_plugin(
            JournalPlugin(self._settings.store_dir / "events.jsonl"),
            name="journal-builtin",
        )
        self._event_bus = EventBus(
            self._engine,
            pm,
            sync=sync,
            max_retries=self._settings.events.max_retries,
        )

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection inside a single DB transaction.

        Usage::

            with store.transaction() as conn:
                repo = AssetRepository(conn)
                ...
        """
        with self._engine.begin() as conn:
            yield conn

    def close(self) -> None:
        """Flush pending events and dispose of the engine."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
        self._engine.dispose()

"""Built-in journal plugin: appends published events to a JSON Lines file.

One line per event, in publication order, so downstream consumers can tail
the file without touching the database.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pluggy

hookimpl = pluggy.HookimplMarker("availctl")

logger = logging.getLogger(__name__)


class JournalPlugin:
    """Append-only event journal."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @hookimpl
    def post_asset_event(
        self,
        event_type: str,
        asset_id: str,
        payload: dict[str, Any],
    ) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps({"event_type": event_type, "asset_id": asset_id, **payload})
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        logger.debug("Journaled %s for %s", event_type, asset_id)

"""Pluggy hook specifications for availctl lifecycle events."""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("availctl")


class AvailctlHookSpec:
    """Hook specifications for the availctl plugin system."""

    @hookspec
    def post_asset_event(
        self,
        event_type: str,
        asset_id: str,
        payload: dict[str, Any],
    ) -> None:
        """Called after a successful transition has been committed.

        *event_type* is the event class name (``AssetLocked``, ...) and
        *payload* its JSON-safe serialization.
        """

"""Tests for EventService — outbox draining."""

from pathlib import Path
from typing import Any

import pluggy

from availctl.config.settings import AvlSettings
from availctl.infrastructure.store import AssetStore
from availctl.services.availability import AvailabilityService
from availctl.services.events import EventService

hookimpl = pluggy.HookimplMarker("availctl")


class _Flaky:
    def __init__(self) -> None:
        self.fail = True

    @hookimpl
    def post_asset_event(self, event_type: str, asset_id: str, payload: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("downstream offline")


class TestDrain:
    def test_nothing_pending(self, store: AssetStore) -> None:
        result = EventService(store).drain()
        assert result.ok
        assert result.data == {"count": 0, "failed": 0, "events": []}

    def test_retries_failed_events(self, store: AssetStore, service: AvailabilityService) -> None:
        flaky = _Flaky()
        store.event_bus._pm.register_plugin(flaky, name="flaky")
        service.register("A1")
        service.activate("A1")

        flaky.fail = False
        result = EventService(store).drain()

        assert result.data["count"] == 1
        assert result.data["failed"] == 0
        assert result.data["events"][0]["event_type"] == "AssetActivated"
        assert result.data["events"][0]["status"] == "completed"

    def test_reports_still_failing(self, store: AssetStore, service: AvailabilityService) -> None:
        store.event_bus._pm.register_plugin(_Flaky(), name="flaky")
        service.register("A1")
        service.activate("A1")

        result = EventService(store).drain()
        assert result.data["failed"] == 1
        assert result.data["events"][0]["status"] == "failed"

    def test_disabled_events(self, tmp_path: Path) -> None:
        (tmp_path / "availctl.toml").write_text("[events]\nenabled = false\n")
        store = AssetStore(AvlSettings.from_cli(root=tmp_path))
        try:
            result = EventService(store).drain()
        finally:
            store.close()
        assert result.ok
        assert result.warnings == ["Event publication is disabled"]

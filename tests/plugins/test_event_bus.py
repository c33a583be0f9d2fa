"""Tests for EventBus — outbox-backed event dispatch."""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pluggy
import pytest
from sqlalchemy import select
from sqlalchemy.engine import Engine

from availctl.domain.events import AssetActivated, AssetLocked
from availctl.domain.ids import AssetId, OwnerId
from availctl.infrastructure.database.schema import event_outbox
from availctl.plugins.event_bus import EventBus
from availctl.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("availctl")

A1 = AssetId.of("A1")


# ---------------------------------------------------------------------------
# Fake plugins for testing
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records all hook calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    @hookimpl
    def post_asset_event(self, event_type: str, asset_id: str, payload: dict[str, Any]) -> None:
        self.calls.append((event_type, asset_id, payload))


class FailingPlugin:
    """Plugin that always raises."""

    @hookimpl
    def post_asset_event(self, event_type: str, asset_id: str, payload: dict[str, Any]) -> None:
        raise RuntimeError("plugin exploded")


def _rows(engine: Engine) -> list[Any]:
    with engine.connect() as conn:
        return conn.execute(select(event_outbox).order_by(event_outbox.c.id)).fetchall()


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def sync_bus(db_engine: Engine, recorder: RecordingPlugin) -> Iterator[EventBus]:
    pm = PluginManager()
    pm.register_plugin(recorder)
    bus = EventBus(db_engine, pm, sync=True)
    yield bus
    bus.shutdown()


class TestSyncDispatch:
    def test_publish_dispatches_and_completes(
        self, sync_bus: EventBus, recorder: RecordingPlugin, db_engine: Engine
    ) -> None:
        event = AssetActivated(asset_id=A1)
        row_id = sync_bus.publish(event)

        assert recorder.calls == [("AssetActivated", "A1", event.to_payload())]
        rows = _rows(db_engine)
        assert len(rows) == 1
        assert rows[0].id == row_id
        assert rows[0].event_id == event.event_id
        assert rows[0].status == "completed"
        assert rows[0].completed is not None
        assert json.loads(rows[0].payload)["type"] == "AssetActivated"

    def test_payload_fields_reach_plugins(
        self, sync_bus: EventBus, recorder: RecordingPlugin
    ) -> None:
        until = datetime(2026, 3, 2, 11, 0, tzinfo=UTC)
        sync_bus.publish(AssetLocked(asset_id=A1, owner_id=OwnerId.of("O1"), valid_until=until))
        _, _, payload = recorder.calls[0]
        assert payload["owner_id"] == "O1"
        assert payload["valid_until"].startswith("2026-03-02T11:00:00")

    def test_no_plugins_still_completes(self, db_engine: Engine) -> None:
        bus = EventBus(db_engine, PluginManager(), sync=True)
        bus.publish(AssetActivated(asset_id=A1))
        assert _rows(db_engine)[0].status == "completed"


class TestFailures:
    def test_failure_is_recorded_not_raised(self, db_engine: Engine) -> None:
        pm = PluginManager()
        pm.register_plugin(FailingPlugin())
        bus = EventBus(db_engine, pm, sync=True, max_retries=3)

        bus.publish(AssetActivated(asset_id=A1))

        row = _rows(db_engine)[0]
        assert row.status == "failed"
        assert row.retries == 1
        assert "plugin exploded" in row.error

    def test_dead_letter_after_max_retries(self, db_engine: Engine) -> None:
        pm = PluginManager()
        pm.register_plugin(FailingPlugin())
        bus = EventBus(db_engine, pm, sync=True, max_retries=2)

        bus.publish(AssetActivated(asset_id=A1))
        results = bus.drain()

        assert results == [{"id": 1, "event_type": "AssetActivated", "status": "dead_letter"}]
        assert bus.drain() == []

    def test_drain_recovers_after_fix(self, db_engine: Engine) -> None:
        pm = PluginManager()
        failing = FailingPlugin()
        pm.register_plugin(failing)
        bus = EventBus(db_engine, pm, sync=True, max_retries=5)
        bus.publish(AssetActivated(asset_id=A1))

        pm.unregister(failing)
        recorder = RecordingPlugin()
        pm.register_plugin(recorder)
        results = bus.drain()

        assert [r["status"] for r in results] == ["completed"]
        assert len(recorder.calls) == 1
        assert _rows(db_engine)[0].error is None


class TestAsyncDispatch:
    def test_shutdown_waits_for_dispatch(self, db_engine: Engine) -> None:
        pm = PluginManager()
        recorder = RecordingPlugin()
        pm.register_plugin(recorder)
        bus = EventBus(db_engine, pm, sync=False)

        bus.publish(AssetActivated(asset_id=A1))
        bus.publish(AssetActivated(asset_id=AssetId.of("A2")))
        bus.shutdown()

        assert sorted(call[1] for call in recorder.calls) == ["A1", "A2"]
        assert {row.status for row in _rows(db_engine)} == {"completed"}

    def test_drain_waits_for_in_flight(self, db_engine: Engine) -> None:
        pm = PluginManager()
        pm.register_plugin(RecordingPlugin())
        bus = EventBus(db_engine, pm, sync=False)
        try:
            bus.publish(AssetActivated(asset_id=A1))
            assert bus.drain() == []
        finally:
            bus.shutdown()

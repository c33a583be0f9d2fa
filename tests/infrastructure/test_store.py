"""Tests for AssetStore — engine ownership, transactions and event bus wiring."""

from pathlib import Path

import pytest
from sqlalchemy import insert, select

from availctl.config.settings import AvlSettings
from availctl.infrastructure.database.schema import assets
from availctl.infrastructure.store import AssetStore
from availctl.plugins.event_bus import EventBus


class TestAssetStore:
    def test_creates_database(self, settings: AvlSettings) -> None:
        store = AssetStore(settings)
        try:
            assert settings.db_path.exists()
            assert store.root == settings.root
            assert store.settings is settings
        finally:
            store.close()

    def test_event_bus_lazy(self, settings: AvlSettings) -> None:
        store = AssetStore(settings)
        try:
            assert store.event_bus is None
            store.init_event_bus(sync=True)
            assert isinstance(store.event_bus, EventBus)
        finally:
            store.close()
        assert store.event_bus is None

    def test_events_disabled(self, tmp_path: Path) -> None:
        (tmp_path / "availctl.toml").write_text("[events]\nenabled = false\n")
        store = AssetStore(AvlSettings.from_cli(root=tmp_path))
        try:
            store.init_event_bus(sync=True)
            assert store.event_bus is None
        finally:
            store.close()

    def test_transaction_commits(self, store: AssetStore) -> None:
        with store.transaction() as conn:
            conn.execute(insert(assets).values(asset_id="A1", created="t", modified="t"))
        with store.engine.connect() as conn:
            assert conn.execute(select(assets.c.asset_id)).scalars().all() == ["A1"]

    def test_transaction_rolls_back_on_error(self, store: AssetStore) -> None:
        with pytest.raises(RuntimeError), store.transaction() as conn:
            conn.execute(insert(assets).values(asset_id="A1", created="t", modified="t"))
            raise RuntimeError("boom")
        with store.engine.connect() as conn:
            assert conn.execute(select(assets.c.asset_id)).scalars().all() == []

    def test_journal_plugin_registered(self, store: AssetStore) -> None:
        assert "journal-builtin" in store.event_bus._pm.list_plugin_names()

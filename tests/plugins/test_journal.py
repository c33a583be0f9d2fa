"""Tests for the built-in JSON Lines journal plugin."""

import json
from pathlib import Path

from availctl.plugins.builtins.journal import JournalPlugin
from availctl.plugins.manager import PluginManager


class TestJournalPlugin:
    def test_appends_one_line_per_event(self, tmp_path: Path) -> None:
        journal = JournalPlugin(tmp_path / "nested" / "events.jsonl")
        journal.post_asset_event(
            event_type="AssetActivated", asset_id="A1", payload={"type": "AssetActivated"}
        )
        journal.post_asset_event(
            event_type="AssetWithdrawn", asset_id="A1", payload={"type": "AssetWithdrawn"}
        )

        lines = journal.path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["event_type"] for line in lines] == [
            "AssetActivated",
            "AssetWithdrawn",
        ]
        assert json.loads(lines[0])["asset_id"] == "A1"

    def test_called_through_hook(self, tmp_path: Path) -> None:
        pm = PluginManager()
        journal = JournalPlugin(tmp_path / "events.jsonl")
        pm.register_plugin(journal)
        pm.hook.post_asset_event(
            event_type="AssetLocked",
            asset_id="A1",
            payload={"owner_id": "O1", "valid_until": "2026-03-02T11:00:00Z"},
        )
        entry = json.loads(journal.path.read_text(encoding="utf-8"))
        assert entry == {
            "event_type": "AssetLocked",
            "asset_id": "A1",
            "owner_id": "O1",
            "valid_until": "2026-03-02T11:00:00Z",
        }

"""Shared pytest fixtures and test helpers for availctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from availctl.config.settings import AvlSettings
from availctl.infrastructure.database.engine import init_database
from availctl.infrastructure.store import AssetStore
from availctl.services.availability import AvailabilityService

START = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class FixedClock:
    """Deterministic clock; advance it explicitly."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / ".availctl" / "availctl.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AvlSettings:
    monkeypatch.delenv("AVAILCTL_CONFIG", raising=False)
    return AvlSettings.from_cli(root=tmp_path, sync=True)


@pytest.fixture
def store(settings: AvlSettings) -> Iterator[AssetStore]:
    """Asset store on a temp directory with a synchronous event bus."""
    s = AssetStore(settings)
    s.init_event_bus(sync=True)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def service(store: AssetStore, clock: FixedClock) -> AvailabilityService:
    return AvailabilityService(store, clock=clock)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test classes.
    """
    monkeypatch.delenv("AVAILCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

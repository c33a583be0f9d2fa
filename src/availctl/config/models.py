"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, availctl.toml only contains overrides.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    dirname: str = ".availctl"
    filename: str = "availctl.db"


class LocksConfig(BaseModel):
    """[locks] section."""

    model_config = {"frozen": True}

    default_duration_minutes: int = Field(default=60, gt=0)
    max_duration_minutes: int = Field(default=525_600, gt=0)
    indefinite_lock_days: int = Field(default=365, gt=0)

    @property
    def default_duration(self) -> timedelta:
        return timedelta(minutes=self.default_duration_minutes)

    @property
    def max_duration(self) -> timedelta:
        return timedelta(minutes=self.max_duration_minutes)

    @property
    def indefinite_duration(self) -> timedelta:
        return timedelta(days=self.indefinite_lock_days)


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    max_retries: int = Field(default=3, ge=1)


class AvlConfig(BaseModel):
    """Root config model — all sections of availctl.toml."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    locks: LocksConfig = Field(default_factory=LocksConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)

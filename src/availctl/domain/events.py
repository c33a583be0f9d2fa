"""Outcome values produced by the availability state machine.

Successful transitions yield events; refused transitions yield rejections
carrying a stable :class:`RejectionReason`. All values are frozen and are
produced, never stored, by the entity. Serialization and publication belong
to the plugin layer.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

from availctl.domain.ids import AssetId, OwnerId


class RejectionReason(StrEnum):
    """Closed taxonomy of reason codes for refused transitions."""

    ASSET_CURRENTLY_LOCKED = "ASSET_CURRENTLY_LOCKED"
    ASSET_ALREADY_ACTIVATED = "ASSET_ALREADY_ACTIVATED"
    NO_LOCK_DEFINED_FOR_OWNER = "NO_LOCK_DEFINED_FOR_OWNER"
    NO_LOCK_ON_THE_ASSET = "NO_LOCK_ON_THE_ASSET"


def _new_event_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AvailabilityEvent(BaseModel):
    """Common shape of every outcome value."""

    model_config = {"frozen": True}

    event_id: str = Field(default_factory=_new_event_id)
    occurred_at: AwareDatetime = Field(default_factory=_utcnow)
    asset_id: AssetId

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe dict including the ``type`` tag."""
        return {"type": self.event_type, **self.model_dump(mode="json")}


class AvailabilityRejection(AvailabilityEvent):
    """Base for refused transitions."""

    reason: RejectionReason


# --- Successful transitions ---


class AssetActivated(AvailabilityEvent):
    pass


class AssetWithdrawn(AvailabilityEvent):
    pass


class AssetLocked(AvailabilityEvent):
    owner_id: OwnerId
    valid_until: AwareDatetime


class AssetUnlocked(AvailabilityEvent):
    owner_id: OwnerId
    at: datetime


class AssetLockExpired(AvailabilityEvent):
    pass


# --- Rejections ---


class AssetActivationRejected(AvailabilityRejection):
    pass


class AssetWithdrawalRejected(AvailabilityRejection):
    pass


class AssetLockRejected(AvailabilityRejection):
    owner_id: OwnerId


class AssetUnlockingRejected(AvailabilityRejection):
    owner_id: OwnerId

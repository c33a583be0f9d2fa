"""Lock variants — a closed tagged union over the ``kind`` discriminator.

Three variants exist, each resolving an owning :class:`OwnerId`:

- ``MaintenanceLock``: sentinel owner ``MAINTENANCE``; asset not yet in service.
- ``WithdrawalLock``: sentinel owner ``WITHDRAWAL``; asset removed from service.
- ``OwnerLock``: time-bounded exclusive hold by a real tenant.

The set is closed. Persisted locks are rebuilt through :data:`LOCK_ADAPTER`.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, Field, TypeAdapter

from availctl.domain.ids import MAINTENANCE_OWNER, WITHDRAWAL_OWNER, OwnerId


class LockKind(StrEnum):
    """Discriminator values for the lock variants."""

    MAINTENANCE = "maintenance"
    WITHDRAWAL = "withdrawal"
    OWNER = "owner"


class MaintenanceLock(BaseModel):
    """Asset not yet put into service."""

    model_config = {"frozen": True}

    kind: Literal["maintenance"] = "maintenance"

    @property
    def owner_id(self) -> OwnerId:
        return OwnerId.of(MAINTENANCE_OWNER)

    def was_made_for(self, owner_id: OwnerId) -> bool:
        return self.owner_id == owner_id


class WithdrawalLock(BaseModel):
    """Asset permanently removed from service."""

    model_config = {"frozen": True}

    kind: Literal["withdrawal"] = "withdrawal"

    @property
    def owner_id(self) -> OwnerId:
        return OwnerId.of(WITHDRAWAL_OWNER)

    def was_made_for(self, owner_id: OwnerId) -> bool:
        return self.owner_id == owner_id


class OwnerLock(BaseModel):
    """Exclusive hold by *owner_id* until *valid_until*."""

    model_config = {"frozen": True}

    kind: Literal["owner"] = "owner"
    owner_id: OwnerId
    valid_until: AwareDatetime

    def was_made_for(self, owner_id: OwnerId) -> bool:
        return self.owner_id == owner_id

    def is_overdue(self, at: datetime) -> bool:
        """True once *at* has reached the expiry timestamp."""
        return self.valid_until <= at


Lock = Annotated[
    MaintenanceLock | WithdrawalLock | OwnerLock,
    Field(discriminator="kind"),
]

LOCK_ADAPTER: TypeAdapter[MaintenanceLock | WithdrawalLock | OwnerLock] = TypeAdapter(Lock)


class AvailabilityState(StrEnum):
    """Coarse state names derived from the current lock."""

    AVAILABLE = "available"
    MAINTENANCE = "maintenance"
    WITHDRAWN = "withdrawn"
    LOCKED = "locked"


def state_of(lock: Lock | None) -> AvailabilityState:
    """Map the current lock (or its absence) to an :class:`AvailabilityState`."""
    match lock:
        case None:
            return AvailabilityState.AVAILABLE
        case MaintenanceLock():
            return AvailabilityState.MAINTENANCE
        case WithdrawalLock():
            return AvailabilityState.WITHDRAWN
        case OwnerLock():
            return AvailabilityState.LOCKED
    raise TypeError(f"Unknown lock variant: {lock!r}")

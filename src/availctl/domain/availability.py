"""AssetAvailability — the availability state machine for one asset.

States: Available (no lock), Maintenance, Withdrawn, OwnerLocked(owner).

    Maintenance            --activate-->               Available
    Available|Maintenance  --withdraw-->               Withdrawn
    Available              --lock_for(o)-->            OwnerLocked(o)
    OwnerLocked(o)         --lock_indefinitely_for(o)-> OwnerLocked(o), extended
    OwnerLocked(o)         --unlock_for(o)-->          Available
    any locked state       --unlock_if_overdue-->      Available

Every mutating call returns a :class:`Success` or :class:`Failure`; invalid
transitions never raise.

INVARIANT: at most one lock is active; ``None`` means Available.
INVARIANT: not thread-safe. One in-flight mutating call per instance; the
persistence layer arbitrates between concurrent callers.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from availctl.domain.events import (
    AssetActivated,
    AssetActivationRejected,
    AssetLocked,
    AssetLockExpired,
    AssetLockRejected,
    AssetUnlocked,
    AssetUnlockingRejected,
    AssetWithdrawalRejected,
    AssetWithdrawn,
    RejectionReason,
)
from availctl.domain.ids import AssetId, OwnerId
from availctl.domain.locks import Lock, MaintenanceLock, OwnerLock, WithdrawalLock
from availctl.domain.result import Failure, Result, Success

INDEFINITE_LOCK_DURATION = timedelta(days=365)

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(UTC)


class AssetAvailability:
    """Availability of a single asset, starting under maintenance."""

    def __init__(
        self,
        asset_id: AssetId,
        *,
        clock: Clock = system_clock,
        indefinite_lock_duration: timedelta = INDEFINITE_LOCK_DURATION,
    ) -> None:
        self._asset_id = asset_id
        self._clock = clock
        self._indefinite_lock_duration = indefinite_lock_duration
        self._current_lock: Lock | None = MaintenanceLock()

    @classmethod
    def of(cls, asset_id: AssetId, *, clock: Clock = system_clock) -> AssetAvailability:
        return cls(asset_id, clock=clock)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def activate(self) -> Result[AssetActivationRejected, AssetActivated]:
        """Put an asset under maintenance into service."""
        now = self._clock()
        if isinstance(self._current_lock, MaintenanceLock):
            self._current_lock = None
            return Success(AssetActivated(asset_id=self._asset_id, occurred_at=now))
        # Also reported from Withdrawn and OwnerLocked.
        return Failure(
            AssetActivationRejected(
                asset_id=self._asset_id,
                occurred_at=now,
                reason=RejectionReason.ASSET_ALREADY_ACTIVATED,
            )
        )

    def withdraw(self) -> Result[AssetWithdrawalRejected, AssetWithdrawn]:
        """Remove an available or not-yet-active asset from service."""
        now = self._clock()
        if self._current_lock is None or isinstance(self._current_lock, MaintenanceLock):
            self._current_lock = WithdrawalLock()
            return Success(AssetWithdrawn(asset_id=self._asset_id, occurred_at=now))
        return Failure(
            AssetWithdrawalRejected(
                asset_id=self._asset_id,
                occurred_at=now,
                reason=RejectionReason.ASSET_CURRENTLY_LOCKED,
            )
        )

    def lock_for(
        self, owner_id: OwnerId, duration: timedelta
    ) -> Result[AssetLockRejected, AssetLocked]:
        """Lock an available asset for *owner_id* until now + *duration*."""
        now = self._clock()
        if self._current_lock is None:
            valid_until = now + duration
            self._current_lock = OwnerLock(owner_id=owner_id, valid_until=valid_until)
            return Success(
                AssetLocked(
                    asset_id=self._asset_id,
                    owner_id=owner_id,
                    valid_until=valid_until,
                    occurred_at=now,
                )
            )
        # TODO: treat a repeated lock_for by the current owner as a reclaim.
        return Failure(
            AssetLockRejected(
                asset_id=self._asset_id,
                occurred_at=now,
                owner_id=owner_id,
                reason=RejectionReason.ASSET_CURRENTLY_LOCKED,
            )
        )

    def lock_indefinitely_for(self, owner_id: OwnerId) -> Result[AssetLockRejected, AssetLocked]:
        """Extend a lock already held by *owner_id*; never originates one."""
        now = self._clock()
        if self._has_active_lock_for(owner_id):
            valid_until = now + self._indefinite_lock_duration
            self._current_lock = OwnerLock(owner_id=owner_id, valid_until=valid_until)
            return Success(
                AssetLocked(
                    asset_id=self._asset_id,
                    owner_id=owner_id,
                    valid_until=valid_until,
                    occurred_at=now,
                )
            )
        return Failure(
            AssetLockRejected(
                asset_id=self._asset_id,
                occurred_at=now,
                owner_id=owner_id,
                reason=RejectionReason.NO_LOCK_DEFINED_FOR_OWNER,
            )
        )

    def unlock_for(
        self, owner_id: OwnerId, at: datetime
    ) -> Result[AssetUnlockingRejected, AssetUnlocked]:
        """Release the lock held by *owner_id*, recording *at* on the event."""
        now = self._clock()
        if self._has_active_lock_for(owner_id):
            self._current_lock = None
            return Success(
                AssetUnlocked(asset_id=self._asset_id, owner_id=owner_id, at=at, occurred_at=now)
            )
        return Failure(
            AssetUnlockingRejected(
                asset_id=self._asset_id,
                occurred_at=now,
                owner_id=owner_id,
                reason=RejectionReason.NO_LOCK_ON_THE_ASSET,
            )
        )

    def unlock_if_overdue(self) -> AssetLockExpired | None:
        """Clear whatever lock is present.

        No time comparison happens here; the caller decides the lock is
        overdue. Returns None when the asset is already unlocked.
        """
        if self._current_lock is None:
            return None
        self._current_lock = None
        return AssetLockExpired(asset_id=self._asset_id, occurred_at=self._clock())

    # ------------------------------------------------------------------
    # Accessors and reconstruction
    # ------------------------------------------------------------------

    def id(self) -> AssetId:
        return self._asset_id

    def current_lock(self) -> Lock | None:
        return self._current_lock

    def with_lock(self, lock: Lock | None) -> AssetAvailability:
        """Overwrite the current lock, bypassing every transition rule.

        Used to rebuild an entity from persisted state.
        """
        self._current_lock = lock
        return self

    def _has_active_lock_for(self, owner_id: OwnerId) -> bool:
        return self._current_lock is not None and self._current_lock.was_made_for(owner_id)

    def __repr__(self) -> str:
        return f"AssetAvailability({self._asset_id!s}, current_lock={self._current_lock!r})"

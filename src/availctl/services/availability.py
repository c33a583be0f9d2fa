"""AvailabilityService — load, transition, persist, publish.

Pipeline for every transition: VALIDATE → LOAD → APPLY → SAVE → PUBLISH

The entity decides whether a transition is legal; this service only
resolves identifiers, arbitrates concurrent writers through the version
column, and publishes committed events. Rejections come back as
``ServiceError`` with the entity's reason code.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from availctl.config.logging import asset_context
from availctl.domain.availability import AssetAvailability, Clock, system_clock
from availctl.domain.events import AvailabilityEvent, AvailabilityRejection
from availctl.domain.ids import AssetId, OwnerId
from availctl.domain.locks import OwnerLock, state_of
from availctl.domain.result import Failure, Result
from availctl.infrastructure.repositories.assets import (
    AssetAlreadyExistsError,
    AssetRepository,
    ConcurrentModificationError,
    lock_from_columns,
)
from availctl.services.base import BaseService
from availctl.services.result import ErrorCode, ServiceError, ServiceResult
from availctl.services.telemetry import traced

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from availctl.infrastructure.store import AssetStore

log = structlog.get_logger(__name__)

Transition = Callable[[AssetAvailability], Result[AvailabilityRejection, AvailabilityEvent]]


def describe(availability: AssetAvailability, *, now: datetime | None = None) -> dict[str, Any]:
    """JSON-safe summary of an entity's current state."""
    lock = availability.current_lock()
    data: dict[str, Any] = {
        "asset_id": availability.id().value,
        "state": str(state_of(lock)),
        "lock": lock.model_dump(mode="json") if lock is not None else None,
    }
    if now is not None and isinstance(lock, OwnerLock):
        data["overdue"] = lock.is_overdue(now)
    return data


class AvailabilityService(BaseService):
    """Drives :class:`AssetAvailability` transitions against the store."""

    def __init__(self, store: AssetStore, *, clock: Clock = system_clock) -> None:
        super().__init__(store)
        self._clock = clock
        self._locks = store.settings.locks

    # ------------------------------------------------------------------
    # Registration and queries
    # ------------------------------------------------------------------

    @traced
    def register(self, asset_id: str) -> ServiceResult:
        """Register a new asset. It starts under maintenance."""
        op = "register"
        aid = self._parse_asset_id(op, asset_id)
        if isinstance(aid, ServiceResult):
            return aid

        try:
            with self._store.transaction() as conn:
                availability = self._repository(conn).create(aid)
        except AssetAlreadyExistsError:
            return ServiceResult.failure(
                op, ErrorCode.ALREADY_EXISTS, f"Asset already registered: {aid}", asset_id=str(aid)
            )

        log.info("asset.registered", asset_id=str(aid))
        return ServiceResult(ok=True, op=op, data={**describe(availability), "version": 1})

    @traced
    def show(self, asset_id: str) -> ServiceResult:
        """Current state of one asset."""
        op = "show"
        aid = self._parse_asset_id(op, asset_id)
        if isinstance(aid, ServiceResult):
            return aid

        with self._store.transaction() as conn:
            loaded = self._repository(conn).get(aid)
        if loaded is None:
            return self._not_found(op, aid)

        availability, version = loaded
        return ServiceResult(
            ok=True,
            op=op,
            data={**describe(availability, now=self._clock()), "version": version},
        )

    @traced
    def list_assets(self, *, state: str | None = None) -> ServiceResult:
        """All registered assets, optionally filtered by state name."""
        op = "list"
        with self._store.transaction() as conn:
            rows = self._repository(conn).list_rows()

        items: list[dict[str, Any]] = []
        for row in rows:
            lock = lock_from_columns(row["lock_kind"], row["owner_id"], row["valid_until"])
            item_state = str(state_of(lock))
            if state is not None and item_state != state:
                continue
            items.append(
                {
                    "asset_id": row["asset_id"],
                    "state": item_state,
                    "owner_id": row["owner_id"],
                    "valid_until": row["valid_until"],
                    "version": row["version"],
                    "modified": row["modified"],
                }
            )
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @traced
    def activate(self, asset_id: str) -> ServiceResult:
        return self._transition("activate", asset_id, lambda a: a.activate())

    @traced
    def withdraw(self, asset_id: str) -> ServiceResult:
        return self._transition("withdraw", asset_id, lambda a: a.withdraw())

    @traced
    def lock(
        self,
        asset_id: str,
        owner_id: str,
        duration: timedelta | None = None,
    ) -> ServiceResult:
        """Lock an available asset for *owner_id* (default duration from config)."""
        op = "lock"
        owner = self._parse_owner_id(op, owner_id)
        if isinstance(owner, ServiceResult):
            return owner

        duration = duration if duration is not None else self._locks.default_duration
        if duration <= timedelta(0) or duration > self._locks.max_duration:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_DURATION,
                f"Lock duration must be positive and at most {self._locks.max_duration}",
                duration_seconds=duration.total_seconds(),
            )
        return self._transition(op, asset_id, lambda a: a.lock_for(owner, duration))

    @traced
    def lock_indefinitely(self, asset_id: str, owner_id: str) -> ServiceResult:
        """Extend a lock already held by *owner_id*."""
        op = "lock_indefinitely"
        owner = self._parse_owner_id(op, owner_id)
        if isinstance(owner, ServiceResult):
            return owner
        return self._transition(op, asset_id, lambda a: a.lock_indefinitely_for(owner))

    @traced
    def unlock(self, asset_id: str, owner_id: str, at: datetime | None = None) -> ServiceResult:
        """Release the lock held by *owner_id*."""
        op = "unlock"
        owner = self._parse_owner_id(op, owner_id)
        if isinstance(owner, ServiceResult):
            return owner
        unlocked_at = at if at is not None else self._clock()
        return self._transition(op, asset_id, lambda a: a.unlock_for(owner, unlocked_at))

    @traced
    def expire_overdue(self, now: datetime | None = None) -> ServiceResult:
        """Release every owner lock whose expiry has passed.

        The entity's ``unlock_if_overdue`` never looks at the clock; this
        sweep is where overdue is decided. Each candidate is re-read and
        re-checked in its own transaction, so a lock replaced after the
        scan is left alone and a conflict on one asset does not undo the
        rest.
        """
        op = "expire"
        checked_at = now if now is not None else self._clock()
        warnings: list[str] = []
        events: list[AvailabilityEvent] = []

        with self._store.engine.connect() as conn:
            candidates = self._repository(conn).find_overdue(checked_at)

        for aid in candidates:
            try:
                with asset_context(op, str(aid)), self._store.transaction() as conn:
                    repo = self._repository(conn)
                    loaded = repo.get(aid)
                    if loaded is None:
                        continue
                    availability, version = loaded
                    lock = availability.current_lock()
                    if not (isinstance(lock, OwnerLock) and lock.is_overdue(checked_at)):
                        log.debug("asset.expire_skipped")
                        continue
                    expired = availability.unlock_if_overdue()
                    if expired is None:
                        continue
                    repo.save(availability, version)
            except ConcurrentModificationError:
                log.warning("asset.conflict", asset_id=str(aid), op=op)
                warnings.append(f"Skipped {aid}: modified concurrently")
                continue
            events.append(expired)

        for event in events:
            log.info("asset.expired", asset_id=event.asset_id.value)
            self._publish(event, warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "checked_at": checked_at.isoformat(),
                "count": len(events),
                "expired": [e.asset_id.value for e in events],
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _repository(self, conn: Connection) -> AssetRepository:
        return AssetRepository(
            conn,
            clock=self._clock,
            indefinite_lock_duration=self._locks.indefinite_duration,
        )

    def _transition(self, op: str, asset_id: str, apply: Transition) -> ServiceResult:
        aid = self._parse_asset_id(op, asset_id)
        if isinstance(aid, ServiceResult):
            return aid
        with asset_context(op, str(aid)):
            return self._apply(op, aid, apply)

    def _apply(self, op: str, aid: AssetId, apply: Transition) -> ServiceResult:
        warnings: list[str] = []
        try:
            with self._store.transaction() as conn:
                repo = self._repository(conn)
                loaded = repo.get(aid)
                if loaded is None:
                    return self._not_found(op, aid)

                availability, version = loaded
                outcome = apply(availability)
                if isinstance(outcome, Failure):
                    return self._rejected(op, outcome.rejection)

                event = outcome.event
                new_version = repo.save(availability, version)
        except ConcurrentModificationError as exc:
            log.warning("asset.conflict")
            return ServiceResult.failure(op, ErrorCode.CONFLICT, str(exc), asset_id=str(aid))

        log.info("asset.transition", event_type=event.event_type)
        self._publish(event, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **describe(availability),
                "version": new_version,
                "event": event.to_payload(),
            },
            warnings=warnings,
        )

    def _rejected(self, op: str, rejection: AvailabilityRejection) -> ServiceResult:
        log.info(
            "asset.rejected",
            op=op,
            asset_id=rejection.asset_id.value,
            reason=str(rejection.reason),
        )
        return ServiceResult(ok=False, op=op, error=ServiceError.from_rejection(rejection))

    @staticmethod
    def _not_found(op: str, aid: AssetId) -> ServiceResult:
        return ServiceResult.failure(
            op, ErrorCode.NOT_FOUND, f"No asset registered with ID: {aid}", asset_id=str(aid)
        )

    @staticmethod
    def _parse_asset_id(op: str, raw: str) -> AssetId | ServiceResult:
        try:
            return AssetId.of(raw)
        except ValidationError:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_ID, "Asset ID must be a non-empty string", asset_id=raw
            )

    @staticmethod
    def _parse_owner_id(op: str, raw: str) -> OwnerId | ServiceResult:
        try:
            owner = OwnerId.of(raw)
        except ValidationError:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_ID, "Owner ID must be a non-empty string", owner_id=raw
            )
        if owner.is_reserved():
            return ServiceResult.failure(
                op,
                ErrorCode.RESERVED_OWNER_ID,
                f"Owner ID {owner} is reserved for maintenance and withdrawal locks",
                owner_id=raw,
            )
        return owner

"""Repository mapping ``assets`` rows to :class:`AssetAvailability` entities.

Writes use optimistic concurrency: every save compares the ``version``
read at load time and bumps it. A mismatch means another writer got there
first and the whole transaction must be abandoned.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from availctl.domain.availability import (
    INDEFINITE_LOCK_DURATION,
    AssetAvailability,
    system_clock,
)
from availctl.domain.ids import AssetId
from availctl.domain.locks import LOCK_ADAPTER, Lock, LockKind, OwnerLock
from availctl.infrastructure.database.schema import assets

if TYPE_CHECKING:
    from datetime import timedelta

    from sqlalchemy import Connection

    from availctl.domain.availability import Clock


class AssetAlreadyExistsError(Exception):
    """An asset with this id is already registered."""

    def __init__(self, asset_id: AssetId) -> None:
        super().__init__(f"Asset already registered: {asset_id}")
        self.asset_id = asset_id


class ConcurrentModificationError(Exception):
    """The stored version no longer matches the version that was loaded."""

    def __init__(self, asset_id: AssetId, expected_version: int) -> None:
        super().__init__(
            f"Asset {asset_id} was modified concurrently (expected v{expected_version})"
        )
        self.asset_id = asset_id
        self.expected_version = expected_version


def lock_to_columns(lock: Lock | None) -> dict[str, Any]:
    """Flatten a lock into the ``lock_kind``/``owner_id``/``valid_until`` columns."""
    if lock is None:
        return {"lock_kind": None, "owner_id": None, "valid_until": None}
    if isinstance(lock, OwnerLock):
        return {
            "lock_kind": str(LockKind.OWNER),
            "owner_id": lock.owner_id.value,
            "valid_until": lock.valid_until.isoformat(),
        }
    return {"lock_kind": lock.kind, "owner_id": None, "valid_until": None}


def lock_from_columns(
    lock_kind: str | None, owner_id: str | None, valid_until: str | None
) -> Lock | None:
    """Inverse of :func:`lock_to_columns`."""
    if lock_kind is None:
        return None
    data: dict[str, Any] = {"kind": lock_kind}
    if lock_kind == LockKind.OWNER:
        data["owner_id"] = owner_id
        data["valid_until"] = valid_until
    return LOCK_ADAPTER.validate_python(data)


class AssetRepository:
    """Encapsulates SQL for the ``assets`` table within one connection."""

    def __init__(
        self,
        conn: Connection,
        *,
        clock: Clock = system_clock,
        indefinite_lock_duration: timedelta = INDEFINITE_LOCK_DURATION,
    ) -> None:
        self._conn = conn
        self._clock = clock
        self._indefinite_lock_duration = indefinite_lock_duration

    def _new_entity(self, asset_id: AssetId) -> AssetAvailability:
        return AssetAvailability(
            asset_id,
            clock=self._clock,
            indefinite_lock_duration=self._indefinite_lock_duration,
        )

    def create(self, asset_id: AssetId) -> AssetAvailability:
        """Insert a fresh asset (under maintenance) and return it."""
        availability = self._new_entity(asset_id)
        now = self._clock().isoformat()
        try:
            self._conn.execute(
                insert(assets).values(
                    asset_id=asset_id.value,
                    version=1,
                    created=now,
                    modified=now,
                    **lock_to_columns(availability.current_lock()),
                )
            )
        except IntegrityError as exc:
            raise AssetAlreadyExistsError(asset_id) from exc
        return availability

    def get(self, asset_id: AssetId) -> tuple[AssetAvailability, int] | None:
        """Load an asset and the version it was read at, or None."""
        stmt = select(assets).where(assets.c.asset_id == asset_id.value)
        row = self._conn.execute(stmt).first()
        if row is None:
            return None
        lock = lock_from_columns(row.lock_kind, row.owner_id, row.valid_until)
        return self._new_entity(asset_id).with_lock(lock), int(row.version)

    def save(self, availability: AssetAvailability, expected_version: int) -> int:
        """Persist the current lock if nobody else wrote since the load.

        Returns the new version. Raises :class:`ConcurrentModificationError`
        on a version mismatch.
        """
        new_version = expected_version + 1
        result = self._conn.execute(
            update(assets)
            .where(
                assets.c.asset_id == availability.id().value,
                assets.c.version == expected_version,
            )
            .values(
                version=new_version,
                modified=self._clock().isoformat(),
                **lock_to_columns(availability.current_lock()),
            )
        )
        if result.rowcount != 1:
            raise ConcurrentModificationError(availability.id(), expected_version)
        return new_version

    def list_rows(self) -> list[dict[str, Any]]:
        """All asset rows ordered by id."""
        rows = self._conn.execute(select(assets).order_by(assets.c.asset_id)).mappings().all()
        return [dict(row) for row in rows]

    def find_overdue(self, now: datetime) -> list[AssetId]:
        """Ids of assets holding an owner lock that expired at or before *now*."""
        rows = self._conn.execute(
            select(assets.c.asset_id, assets.c.valid_until)
            .where(assets.c.lock_kind == str(LockKind.OWNER))
            .order_by(assets.c.asset_id)
        ).all()
        # Offsets may differ between rows, so compare parsed datetimes.
        reference = now.astimezone(UTC)
        return [
            AssetId.of(row.asset_id)
            for row in rows
            if row.valid_until is not None
            and datetime.fromisoformat(row.valid_until) <= reference
        ]

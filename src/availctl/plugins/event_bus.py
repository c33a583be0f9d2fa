"""Outbox-backed event publication via pluggy + ThreadPoolExecutor.

Each committed transition event is written to ``event_outbox`` before its
hook runs, so an event is never lost if the process exits mid-dispatch.
``drain()`` retries pending and failed rows synchronously.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from availctl.infrastructure.database.schema import event_outbox
from availctl.services._helpers import now_iso

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from availctl.domain.events import AvailabilityEvent
    from availctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

HOOK_NAME = "post_asset_event"


class EventBus:
    """Publishes availability events to plugins through the outbox table.

    Parameters:
        engine: SQLAlchemy engine with the ``event_outbox`` table.
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Dispatch inline instead of on a worker thread.
        max_retries: Attempts before a row is marked ``dead_letter``.
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._sync = sync
        self._max_retries = max_retries
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._futures: list[Future[None]] = []

    def publish(self, event: AvailabilityEvent) -> int:
        """Record *event* in the outbox, then dispatch it. Returns the row id."""
        payload = event.to_payload()
        row_id = self._write_outbox(event, payload)

        if self._sync or self._executor is None:
            self._execute_hook(row_id, event.event_type, payload)
        else:
            future = self._executor.submit(self._execute_hook, row_id, event.event_type, payload)
            self._futures.append(future)
        return row_id

    def drain(self) -> list[dict[str, Any]]:
        """Retry pending/failed rows synchronously.

        Returns ``{id, event_type, status}`` for each retried row.
        """
        self._wait_futures()

        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_outbox.c.id, event_outbox.c.event_type, event_outbox.c.payload)
                .where(event_outbox.c.status.in_(["pending", "failed"]))
                .order_by(event_outbox.c.id)
            ).fetchall()

        results: list[dict[str, Any]] = []
        for row in rows:
            self._execute_hook(row.id, row.event_type, json.loads(row.payload))
            with self._engine.connect() as conn:
                status = conn.execute(
                    select(event_outbox.c.status).where(event_outbox.c.id == row.id)
                ).scalar_one()
            results.append({"id": row.id, "event_type": row.event_type, "status": status})
        return results

    def shutdown(self) -> None:
        """Wait for in-flight dispatches and stop the worker pool."""
        self._wait_futures()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _write_outbox(self, event: AvailabilityEvent, payload: dict[str, Any]) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(event_outbox).values(
                    event_id=event.event_id,
                    asset_id=event.asset_id.value,
                    event_type=event.event_type,
                    payload=json.dumps(payload),
                    status="pending",
                    retries=0,
                    created=now_iso(),
                )
            )
            assert result.lastrowid is not None
            return result.lastrowid

    def _execute_hook(self, row_id: int, event_type: str, payload: dict[str, Any]) -> None:
        try:
            getattr(self._pm.hook, HOOK_NAME)(
                event_type=event_type,
                asset_id=payload["asset_id"],
                payload=payload,
            )
        except Exception as exc:
            logger.warning("Event hook failed for %s: %s", event_type, exc)
            self._mark_failed(row_id, str(exc))
        else:
            self._mark_completed(row_id)

    def _mark_completed(self, row_id: int) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(event_outbox)
                .where(event_outbox.c.id == row_id)
                .values(status="completed", error=None, completed=now_iso())
            )

    def _mark_failed(self, row_id: int, error: str) -> None:
        """Increment retries, mark failed or dead_letter."""
        with self._engine.begin() as conn:
            retries = conn.execute(
                select(event_outbox.c.retries).where(event_outbox.c.id == row_id)
            ).scalar_one()
            new_retries = retries + 1
            new_status = "dead_letter" if new_retries >= self._max_retries else "failed"
            conn.execute(
                update(event_outbox)
                .where(event_outbox.c.id == row_id)
                .values(
                    status=new_status,
                    error=error,
                    retries=new_retries,
                    completed=now_iso() if new_status == "dead_letter" else None,
                )
            )

    def _wait_futures(self) -> None:
        for future in self._futures:
            try:
                future.result(timeout=30)
            except Exception:
                logger.debug("Event dispatch future raised", exc_info=True)
        self._futures.clear()

"""EventService — maintenance of the event outbox."""

from __future__ import annotations

from availctl.services.base import BaseService
from availctl.services.result import ServiceResult
from availctl.services.telemetry import traced


class EventService(BaseService):
    """Operations on published events."""

    @traced
    def drain(self) -> ServiceResult:
        """Retry pending and failed outbox rows synchronously."""
        op = "drain"
        bus = self._store.event_bus
        if bus is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={"count": 0, "events": []},
                warnings=["Event publication is disabled"],
            )

        retried = bus.drain()
        failed = [r for r in retried if r["status"] != "completed"]
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(retried), "failed": len(failed), "events": retried},
        )

"""BaseService — foundation for availctl services.

Every service receives an :class:`AssetStore` at construction time and
owns its transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from availctl.domain.events import AvailabilityEvent
    from availctl.infrastructure.store import AssetStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, store: AssetStore) -> None:
        self._store = store

    def _publish(self, event: AvailabilityEvent, warnings: list[str]) -> None:
        """Publish a committed event. No-op if the event bus is not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._store.event_bus
        if bus is None:
            return
        try:
            bus.publish(event)
        except Exception:
            logger.debug("Event publication failed for %s", event.event_type, exc_info=True)
            warnings.append(f"Event publication failed for {event.event_type}")

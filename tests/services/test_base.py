"""Tests for BaseService and service inheritance."""

from availctl.domain.events import AssetActivated
from availctl.domain.ids import AssetId
from availctl.infrastructure.store import AssetStore
from availctl.services.availability import AvailabilityService
from availctl.services.base import BaseService
from availctl.services.events import EventService


class TestBaseService:
    def test_store_stored(self, store: AssetStore) -> None:
        assert BaseService(store)._store is store

    def test_publish_without_bus_is_noop(self, settings) -> None:
        store = AssetStore(settings)
        try:
            warnings: list[str] = []
            BaseService(store)._publish(AssetActivated(asset_id=AssetId.of("A1")), warnings)
            assert warnings == []
        finally:
            store.close()

    def test_services_extend_base(self) -> None:
        assert issubclass(AvailabilityService, BaseService)
        assert issubclass(EventService, BaseService)

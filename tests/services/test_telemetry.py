"""Tests for the @traced timing decorator."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from availctl.services.availability import AvailabilityService
from availctl.services.result import ServiceResult
from availctl.services.telemetry import (
    disable_telemetry,
    enable_telemetry,
    is_enabled,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()


@traced
def _ok_op() -> ServiceResult:
    return ServiceResult(ok=True, op="probe", meta={"source": "test"})


@traced
def _plain_op() -> int:
    return 42


class TestTraced:
    def test_disabled_is_passthrough(self) -> None:
        assert not is_enabled()
        assert _ok_op().meta == {"source": "test"}

    def test_enabled_records_duration(self) -> None:
        enable_telemetry()
        meta = _ok_op().meta
        assert meta is not None
        assert meta["source"] == "test"
        assert meta["duration_ms"] >= 0

    def test_non_result_return_untouched(self) -> None:
        enable_telemetry()
        assert _plain_op() == 42

    def test_preserves_metadata(self) -> None:
        assert _ok_op.__name__ == "_ok_op"

    def test_exception_propagates(self) -> None:
        @traced
        def boom() -> ServiceResult:
            raise ValueError("boom")

        enable_telemetry()
        with pytest.raises(ValueError, match="boom"):
            boom()

    def test_service_methods_traced(self, service: AvailabilityService) -> None:
        enable_telemetry()
        result = service.register("A1")
        assert result.ok
        assert "duration_ms" in (result.meta or {})

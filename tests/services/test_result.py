"""Tests for ServiceResult and ServiceError."""

import pytest

from availctl.domain.events import AssetLockRejected, RejectionReason
from availctl.domain.ids import AssetId, OwnerId
from availctl.services.result import ErrorCode, ServiceError, ServiceResult


class TestServiceError:
    def test_detail_defaults_empty(self) -> None:
        err = ServiceError(code="NOT_FOUND", message="missing")
        assert err.detail == {}

    def test_frozen(self) -> None:
        err = ServiceError(code="CONFLICT", message="stale")
        with pytest.raises(Exception):
            err.code = "OTHER"  # type: ignore[misc]


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="show", data={"asset_id": "A1"})
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_serializes(self) -> None:
        result = ServiceResult(
            ok=False,
            op="lock",
            error=ServiceError(
                code="ASSET_CURRENTLY_LOCKED",
                message="AssetLockRejected: ASSET_CURRENTLY_LOCKED",
                detail={"owner_id": "O2"},
            ),
        )
        dumped = result.model_dump()
        assert dumped["ok"] is False
        assert dumped["error"]["code"] == "ASSET_CURRENTLY_LOCKED"
        assert dumped["error"]["detail"] == {"owner_id": "O2"}

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="expire", data={"count": 0, "expired": []})
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result


class TestFailureHelpers:
    def test_failure_builds_error(self) -> None:
        result = ServiceResult.failure("show", ErrorCode.NOT_FOUND, "missing", asset_id="A9")
        assert not result.ok
        assert result.error_code == "NOT_FOUND"
        assert result.error.detail == {"asset_id": "A9"}
        assert result.model_dump(mode="json")["error"]["code"] == "NOT_FOUND"

    def test_error_code_none_on_success(self) -> None:
        assert ServiceResult(ok=True, op="show").error_code is None

    def test_from_rejection(self) -> None:
        rejection = AssetLockRejected(
            asset_id=AssetId.of("A1"),
            owner_id=OwnerId.of("O2"),
            reason=RejectionReason.ASSET_CURRENTLY_LOCKED,
        )
        err = ServiceError.from_rejection(rejection)
        assert err.code == "ASSET_CURRENTLY_LOCKED"
        assert err.message == "AssetLockRejected: ASSET_CURRENTLY_LOCKED"
        assert err.detail["owner_id"] == "O2"
        assert err.detail["type"] == "AssetLockRejected"

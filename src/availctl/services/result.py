"""Service outcomes handed to the CLI.

Every service method answers with a :class:`ServiceResult`. Refused domain
transitions and service-level problems share one error shape so the
renderers and ``--json`` output never need to know which layer said no.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from availctl.domain.events import AvailabilityRejection


class ErrorCode(StrEnum):
    """Service-level failures that are not transition rejections."""

    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_ID = "INVALID_ID"
    RESERVED_OWNER_ID = "RESERVED_OWNER_ID"
    INVALID_DURATION = "INVALID_DURATION"
    CONFLICT = "CONFLICT"


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is an :class:`ErrorCode` or, for a refused transition, the
    rejection's reason code (``ASSET_CURRENTLY_LOCKED`` and friends).
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_rejection(cls, rejection: AvailabilityRejection) -> ServiceError:
        return cls(
            code=str(rejection.reason),
            message=f"{rejection.event_type}: {rejection.reason}",
            detail=rejection.to_payload(),
        )


class ServiceResult(BaseModel):
    """Outcome of one service call.

    ``data`` carries the asset summary (or the sweep/drain report) on
    success; ``meta`` only appears when telemetry is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        error = ServiceError(code=str(code), message=message, detail=detail)
        return cls(ok=False, op=op, error=error)

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error is not None else None

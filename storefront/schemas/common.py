"""Error body and health check schemas shared by every router."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness answer; no dependency is contacted."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)
    version: str = Field(default="0.1.0", description="Storefront API version")


class DependencyCheck(BaseModel):
    """Outcome of probing one backing service (only the database today)."""

    name: str
    healthy: bool
    latency_ms: float | None = None
    error: str | None = Field(default=None, description="Failure reason when unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness answer; ``unhealthy`` is returned with a 503."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)
    checks: list[DependencyCheck] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """One entry of ``ErrorResponse.details``.

    Request validation fills ``loc`` with the field path; the order
    engine uses it to point at the offending line, e.g.
    ``["items", "<product id>"]`` for an ``insufficient_stock`` error.
    """

    loc: list[str] | None = None
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """JSON body of every non-2xx storefront response.

    ``error`` is a stable machine code (``not_found``, ``invalid_state``,
    ``insufficient_stock``, ``already_enrolled``, ``storage_failure``,
    ...); ``message`` is meant for display, e.g. "Order already processed".
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: list[ErrorDetail] | None = None
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_exception(
        cls,
        error_type: str,
        message: str,
        details: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> "ErrorResponse":
        """Build the body for an ``APIError`` or an unexpected failure.

        Detail dicts missing ``msg`` or ``type`` are filled in rather than
        rejected, so a malformed detail never turns into a second error.
        """
        return cls(
            error=error_type,
            message=message,
            details=[
                ErrorDetail(
                    loc=[str(part) for part in d["loc"]] if d.get("loc") else None,
                    msg=d.get("msg", str(d)),
                    type=d.get("type", "error"),
                )
                for d in details
            ]
            if details
            else None,
            request_id=request_id,
        )

"""Common schemas used across the application."""

from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class LatencySummary(BaseModel):
    """Request latency over the most recent requests, health checks excluded."""

    total_requests: int = Field(description="Requests served since startup")
    window: int = Field(description="Requests covered by the figures below")
    errors: int = Field(description="Failed requests within the window")
    avg_ms: float | None = Field(default=None, description="Mean latency in milliseconds")
    p95_ms: float | None = Field(default=None, description="95th percentile latency in milliseconds")
    max_ms: float | None = Field(default=None, description="Slowest request in milliseconds")


class HealthResponse(BaseModel):
    """Liveness probe response. Never touches storage."""

    status: HealthStatus = Field(description="Current health status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(default="1.0.0", description="API version")
    latency: LatencySummary | None = Field(default=None, description="Recent request latency")


class CheckResult(BaseModel):
    """Result of an individual dependency check."""

    name: str = Field(description="Name of the dependency being checked")
    healthy: bool = Field(description="Whether the dependency is healthy")
    latency_ms: float | None = Field(default=None, description="Response time in milliseconds")
    error: str | None = Field(default=None, description="Error message if unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe response listing each dependency check."""

    status: HealthStatus = Field(description="Overall readiness status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    checks: list[CheckResult] = Field(default_factory=list, description="Individual check results")


class ErrorDetail(BaseModel):
    """One rejected field in a malformed request."""

    loc: list[str] = Field(default_factory=list, description="Path to the offending field, e.g. body, isVerified")
    msg: str = Field(description="What was wrong with the value")
    type: str = Field(description="Pydantic error code")


class ErrorResponse(BaseModel):
    """Body of every failed request.

    Clients display the message field; error is a stable category such as
    not_found or conflict.
    """

    error: str = Field(description="Error category")
    message: str = Field(description="Text shown to the user")
    details: list[ErrorDetail] | None = Field(default=None, description="Per-field problems, body validation only")
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=_utcnow, description="When the error was produced")

"""Health check endpoints for monitoring and deployment verification."""

import time

from fastapi import APIRouter, Response, status
from fastapi.responses import PlainTextResponse

from src.api.deps import Database
from src.api.middleware.latency_logging import get_latency_stats
from src.core.supabase import check_database_connection
from src.schemas.common import (
    CheckResult,
    HealthResponse,
    HealthStatus,
    LatencySummary,
    ReadinessResponse,
)

router = APIRouter(tags=["health"])


@router.get(
    "/ping",
    response_class=PlainTextResponse,
    summary="Wake-up ping",
    description="Plain-text reply used by uptime monitors to keep the service awake.",
)
async def ping() -> str:
    """Answer uptime monitors without touching storage."""
    return "Server is awake!"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Basic health check to verify the service is running. Used for liveness probes.",
)
async def health_check() -> HealthResponse:
    """Return basic health status.

    Always 200 while the process is up. Storage is not checked; the
    latency figures come from the in-process request window.

    Returns:
        HealthResponse: Current health status with recent request latency.
    """
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        latency=LatencySummary(**get_latency_stats().snapshot()),
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Database reachable"},
        503: {"description": "Database unreachable"},
    },
    summary="Readiness check",
    description="Check if the database is available. Used for readiness probes.",
)
async def readiness_check(response: Response, client: Database) -> ReadinessResponse:
    """Check readiness of the profile store.

    Returns 503 if the database is unhealthy.

    Args:
        response: FastAPI response object for setting status code.
        client: Shared Supabase client.

    Returns:
        ReadinessResponse: Status of the database check.
    """
    start_time = time.perf_counter()
    db_result = await check_database_connection(client)
    latency_ms = (time.perf_counter() - start_time) * 1000

    checks = [
        CheckResult(
            name="database",
            healthy=db_result["healthy"],
            latency_ms=round(latency_ms, 2),
            error=db_result.get("error"),
        )
    ]

    all_healthy = all(check.healthy for check in checks)
    overall_status = HealthStatus.HEALTHY if all_healthy else HealthStatus.UNHEALTHY

    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(status=overall_status, checks=checks)

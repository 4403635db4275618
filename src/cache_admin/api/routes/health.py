"""Liveness and readiness probes."""
import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from fastapi import APIRouter, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from cache_admin.api.dependencies import AppSettings
from cache_admin.infrastructure.storage import storage_health_check

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health")


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ===== Schemas =====


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""
    name: str = Field(..., description="Component name")
    status: HealthStatus = Field(..., description="Component health status")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    error: Optional[str] = Field(None, description="Error message if unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe response."""
    status: str = Field(..., description="Readiness status")
    timestamp: datetime = Field(default_factory=_now)
    version: str
    components: List[ComponentHealth] = Field(default_factory=list)


# ===== Helpers =====


async def check_storage_health(backend: str, timeout: float = 5.0) -> ComponentHealth:
    """Check the configured document store. Never raises."""
    start_time = time.time()
    name = f"storage:{backend}"

    try:
        async with asyncio.timeout(timeout):
            healthy = await storage_health_check()
    except asyncio.TimeoutError:
        return ComponentHealth(
            name=name,
            status=HealthStatus.UNHEALTHY,
            latency_ms=round((time.time() - start_time) * 1000, 2),
            error=f"Storage check timed out after {timeout}s",
        )

    return ComponentHealth(
        name=name,
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=round((time.time() - start_time) * 1000, 2),
        error=None if healthy else "Storage is not reachable",
    )


# ===== Endpoints =====


@router.get(
    "/ping",
    response_class=PlainTextResponse,
    summary="Liveness probe",
    responses={200: {"content": {"text/plain": {"example": "pong"}}}},
)
async def ping() -> str:
    """Returns the literal text ``pong`` while the process is serving."""
    return "pong"


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Storage unavailable"}},
)
async def ready(response: Response, settings: AppSettings) -> ReadinessResponse:
    """Ready when the document store answers."""
    storage = await check_storage_health(settings.storage_backend)

    if storage.status == HealthStatus.HEALTHY:
        ready_status = "ready"
    else:
        ready_status = "not_ready"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(f"Readiness check failed: {storage.error}")

    return ReadinessResponse(
        status=ready_status,
        version=settings.app_version,
        components=[storage],
    )

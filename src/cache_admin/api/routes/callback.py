"""
Agent callback routes.

Everything under ``/api/callback/`` except ``/health`` has already passed
the API key middleware, which put the calling agent on
``request.state.agent``.

    POST /api/callback/register-service
    GET  /api/callback/health
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from pydantic import BaseModel, Field

from cache_admin.api.dependencies import ServiceServiceDep
from cache_admin.api.schemas import ServiceRead, ServiceRegistration

router = APIRouter(prefix="/api/callback", tags=["Callback"])


class CallbackHealth(BaseModel):
    status: str = "healthy"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@router.post(
    "/register-service",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Missing or invalid X-Api-Key"},
    },
    summary="Register a service on behalf of the calling agent",
)
async def register_service(
    body: ServiceRegistration,
    request: Request,
    services: ServiceServiceDep,
) -> ServiceRead:
    """
    Create a new service owned by the calling agent.

    The owner is always the agent identified by the API key; an ``agentId``
    in the body is ignored.
    """
    agent = request.state.agent
    service = await services.register(body, agent_id=agent.id)
    return ServiceRead.model_validate(service)


@router.get("/health", response_model=CallbackHealth, summary="Callback liveness")
async def callback_health() -> CallbackHealth:
    return CallbackHealth()

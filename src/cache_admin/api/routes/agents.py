"""
Agent management routes (Admin only).

    GET    /api/agents
    GET    /api/agents/{id}
    POST   /api/agents
    PUT    /api/agents/{id}
    DELETE /api/agents/{id}
    POST   /api/agents/{id}/regenerate-api-key
    GET    /api/agents/{id}/ping
    GET    /api/agents/{id}/services
"""

from fastapi import APIRouter, Depends, Response, status

from cache_admin.api.dependencies import AgentServiceDep
from cache_admin.api.schemas import (
    AgentCreate,
    AgentRead,
    AgentUpdate,
    ApiKeyRotated,
    PingResult,
    ServiceRead,
)
from cache_admin.auth.dependencies import require_roles
from cache_admin.domain.roles import Role

router = APIRouter(
    prefix="/api/agents",
    tags=["Agents"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
    responses={
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is not an Admin"},
    },
)

NOT_FOUND = {404: {"description": "Agent not found"}}


@router.get("", response_model=list[AgentRead], summary="List agents")
async def list_agents(agents: AgentServiceDep) -> list[AgentRead]:
    return [AgentRead.model_validate(agent) for agent in await agents.get_all()]


@router.get("/{agent_id}", response_model=AgentRead, responses=NOT_FOUND, summary="Get an agent")
async def get_agent(agent_id: str, agents: AgentServiceDep) -> AgentRead:
    return AgentRead.model_validate(await agents.get_by_id(agent_id))


@router.post(
    "",
    response_model=AgentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an agent",
)
async def create_agent(body: AgentCreate, agents: AgentServiceDep) -> AgentRead:
    """
    Register an agent and issue its API key.

    The key is returned in the response; configure the agent with it so it
    can call ``/api/callback/*``.
    """
    return AgentRead.model_validate(await agents.create(body))


@router.put("/{agent_id}", response_model=AgentRead, responses=NOT_FOUND, summary="Update an agent")
async def update_agent(agent_id: str, body: AgentUpdate, agents: AgentServiceDep) -> AgentRead:
    return AgentRead.model_validate(await agents.update(agent_id, body))


@router.delete(
    "/{agent_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete an agent",
)
async def delete_agent(agent_id: str, agents: AgentServiceDep) -> Response:
    await agents.delete(agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{agent_id}/regenerate-api-key",
    response_model=ApiKeyRotated,
    responses=NOT_FOUND,
    summary="Rotate the agent API key",
)
async def regenerate_api_key(agent_id: str, agents: AgentServiceDep) -> ApiKeyRotated:
    """Issue a new key. The previous key is rejected from the next request on."""
    return ApiKeyRotated(api_key=await agents.regenerate_api_key(agent_id))


@router.get("/{agent_id}/ping", response_model=PingResult, responses=NOT_FOUND, summary="Ping an agent")
async def ping_agent(agent_id: str, agents: AgentServiceDep) -> PingResult:
    """
    Call the agent's health endpoint.

    Always 200 for a known agent; an unreachable or unhealthy agent is
    reported in the body (``success: false``).
    """
    return await agents.ping(agent_id)


@router.get(
    "/{agent_id}/services",
    response_model=list[ServiceRead],
    responses=NOT_FOUND,
    summary="List services owned by an agent",
)
async def list_agent_services(agent_id: str, agents: AgentServiceDep) -> list[ServiceRead]:
    return [ServiceRead.model_validate(service) for service in await agents.get_services(agent_id)]

"""
Cache routes. Every call is relayed to the agent that owns the service.

    GET    /api/caches/{serviceId}
    GET    /api/caches/{serviceId}/{cacheKey}
    POST   /api/caches/flushall/{serviceId}
    DELETE /api/caches/clear/{serviceId}/{cacheKey}

Error statuses: 404 unknown service or agent, 400 service without an agent
or agent with an inactive key, 403 service not linked to the caller, 500
when the agent call itself fails.
"""

from typing import Optional

from fastapi import APIRouter, Query

from cache_admin.api.dependencies import CacheServiceDep, UserServiceDep
from cache_admin.api.schemas import AgentResponse
from cache_admin.auth.dependencies import CurrentUser
from cache_admin.auth.schemas import UserInfo
from cache_admin.infrastructure.database.models import Service
from cache_admin.services import CacheService, UserService

router = APIRouter(
    prefix="/api/caches",
    tags=["Caches"],
    responses={
        400: {"description": "Service has no agent, or the agent is inactive"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller may not access this service"},
        404: {"description": "Service or agent not found"},
        500: {"description": "Agent request failed"},
    },
)


async def _authorized_service(
    service_id: str,
    user: UserInfo,
    caches: CacheService,
    users: UserService,
) -> Service:
    service = await caches.get_service(service_id)
    await users.ensure_access(user, service)
    return service


# Fixed-prefix routes first so "flushall" and "clear" are not read as service ids


@router.post("/flushall/{service_id}", response_model=list[AgentResponse], summary="Flush every cache of a service")
async def flush_all(
    service_id: str,
    user: CurrentUser,
    caches: CacheServiceDep,
    users: UserServiceDep,
) -> list[AgentResponse]:
    service = await _authorized_service(service_id, user, caches, users)
    return await caches.flush_all(service)


@router.delete(
    "/clear/{service_id}/{cache_key}",
    response_model=list[AgentResponse],
    summary="Clear one cache key",
)
async def clear_by_key(
    service_id: str,
    cache_key: str,
    user: CurrentUser,
    caches: CacheServiceDep,
    users: UserServiceDep,
) -> list[AgentResponse]:
    service = await _authorized_service(service_id, user, caches, users)
    return await caches.clear_by_key(service, cache_key)


@router.get("/{service_id}", response_model=list[AgentResponse], summary="List caches of a service")
async def get_all_caches(
    service_id: str,
    user: CurrentUser,
    caches: CacheServiceDep,
    users: UserServiceDep,
) -> list[AgentResponse]:
    service = await _authorized_service(service_id, user, caches, users)
    return await caches.get_all_caches(service)


@router.get("/{service_id}/{cache_key}", response_model=list[AgentResponse], summary="Get one cache entry")
async def get_cache_by_key(
    service_id: str,
    cache_key: str,
    user: CurrentUser,
    caches: CacheServiceDep,
    users: UserServiceDep,
    node_id: Optional[str] = Query(None, alias="id", description="Agent node to read from"),
) -> list[AgentResponse]:
    service = await _authorized_service(service_id, user, caches, users)
    return await caches.get_cache_by_key(service, cache_key, node_id)

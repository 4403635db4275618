# src/cache_admin/api/dependencies.py
from typing import Annotated, AsyncIterator

import httpx
from fastapi import Depends, Request

from cache_admin.config.settings import Settings, get_settings
from cache_admin.infrastructure.agents import AgentClient
from cache_admin.infrastructure.storage import Repositories, open_repositories
from cache_admin.services import AgentService, AuthService, CacheService, ServiceService, UserService


# Type aliases for clean injection
AppSettings = Annotated[Settings, Depends(get_settings)]


async def get_repositories() -> AsyncIterator[Repositories]:
    """One unit of work per request; committed before the response is sent."""
    async with open_repositories() as repos:
        yield repos


Repos = Annotated[Repositories, Depends(get_repositories, scope="function")]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client created in the app lifespan."""
    return request.app.state.http_client


def get_agent_client(
    settings: AppSettings,
    http: httpx.AsyncClient = Depends(get_http_client),
) -> AgentClient:
    return AgentClient(http, ping_timeout=settings.agent_ping_timeout)


AgentClientDep = Annotated[AgentClient, Depends(get_agent_client)]


def get_user_service(repos: Repos, settings: AppSettings) -> UserService:
    return UserService(repos.users, repos.services, settings.bcrypt_rounds)


def get_agent_service(repos: Repos, client: AgentClientDep) -> AgentService:
    return AgentService(repos.agents, repos.services, client)


def get_service_service(repos: Repos) -> ServiceService:
    return ServiceService(repos.services, repos.agents)


def get_cache_service(repos: Repos, client: AgentClientDep) -> CacheService:
    return CacheService(repos.services, repos.agents, client)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AgentServiceDep = Annotated[AgentService, Depends(get_agent_service)]
ServiceServiceDep = Annotated[ServiceService, Depends(get_service_service)]
CacheServiceDep = Annotated[CacheService, Depends(get_cache_service)]


def get_auth_service(users: UserServiceDep, settings: AppSettings) -> AuthService:
    return AuthService(users, settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]

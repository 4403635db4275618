"""
Cache relay.

Caches are never stored here. Each call resolves the service's agent,
checks it may be called, and forwards one request to the agent's own cache
API with the agent's API key. The agent's answer is returned unmodified.
"""

import logging
from typing import Optional

from cache_admin.api.schemas.caches import AgentResponse
from cache_admin.domain.exceptions import AgentInactive, AgentNotFound, ServiceHasNoAgent, ServiceNotFound
from cache_admin.infrastructure.agents import AgentClient
from cache_admin.infrastructure.database.models import Agent, Service
from cache_admin.interfaces import IRepository

logger = logging.getLogger(__name__)


class CacheService:
    """
    Pre-checks run in order and stop at the first failure:

    1. service exists (404)
    2. service has an agent (400, no network call)
    3. agent exists (404)
    4. agent key is active (400)
    """

    def __init__(self, services: IRepository[Service], agents: IRepository[Agent], client: AgentClient):
        self.services = services
        self.agents = agents
        self.client = client

    async def get_service(self, service_id: str) -> Service:
        service = await self.services.get_by_id(service_id)
        if service is None:
            raise ServiceNotFound(
                f"Service with ID '{service_id}' not found",
                details={"service_id": service_id},
            )
        return service

    async def resolve_agent(self, service: Service) -> Agent:
        if not service.agent_id:
            raise ServiceHasNoAgent(details={"service_id": service.id})

        agent = await self.agents.get_by_id(service.agent_id)
        if agent is None:
            raise AgentNotFound(
                f"Agent with ID '{service.agent_id}' not found",
                details={"agent_id": service.agent_id, "service_id": service.id},
            )
        if not agent.is_api_key_active:
            raise AgentInactive(details={"agent_id": agent.id})
        return agent

    async def get_all_caches(self, service: Service) -> list[AgentResponse]:
        agent = await self.resolve_agent(service)
        return await self.client.get_all_caches(agent, service.name)

    async def get_cache_by_key(
        self,
        service: Service,
        cache_key: str,
        node_id: Optional[str] = None,
    ) -> list[AgentResponse]:
        agent = await self.resolve_agent(service)
        return await self.client.get_cache_by_key(agent, service.name, cache_key, node_id)

    async def flush_all(self, service: Service) -> list[AgentResponse]:
        agent = await self.resolve_agent(service)
        logger.info(f"Flushing all caches of service {service.id} via agent {agent.id}")
        return await self.client.flush_all(agent, service.name)

    async def clear_by_key(self, service: Service, cache_key: str) -> list[AgentResponse]:
        agent = await self.resolve_agent(service)
        logger.info(f"Clearing cache key of service {service.id} via agent {agent.id}")
        return await self.client.clear_by_key(agent, service.name, cache_key)

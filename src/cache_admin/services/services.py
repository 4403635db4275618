"""Service registry: admin CRUD and agent self-registration."""

import logging
from typing import Optional, Sequence

from cache_admin.api.schemas.services import ServiceCreate, ServiceRegistration, ServiceUpdate
from cache_admin.domain.exceptions import AgentNotFound, ServiceNotFound
from cache_admin.infrastructure.database.models import Agent, Service
from cache_admin.interfaces import IRepository

logger = logging.getLogger(__name__)

# Fields an update may overwrite
MUTABLE_FIELDS = ("name", "status", "version", "description", "port")


def _is_provided(value) -> bool:
    return value is not None and value != ""


class ServiceService:
    """Business logic for services."""

    def __init__(self, services: IRepository[Service], agents: IRepository[Agent]):
        self.services = services
        self.agents = agents

    async def get_all(self) -> Sequence[Service]:
        return await self.services.get_all()

    async def get_by_id(self, service_id: str) -> Service:
        """
        Raises:
            ServiceNotFound: No service with this ID
        """
        service = await self.services.get_by_id(service_id)
        if service is None:
            raise ServiceNotFound(
                f"Service with ID '{service_id}' not found",
                details={"service_id": service_id},
            )
        return service

    async def get_by_name(self, name: str) -> Optional[Service]:
        return await self.services.first(name=name)

    async def get_by_agent(self, agent_id: str) -> Sequence[Service]:
        return await self.services.query(agent_id=agent_id)

    async def _ensure_agent(self, agent_id: str) -> None:
        if await self.agents.get_by_id(agent_id) is None:
            raise AgentNotFound(f"Agent with ID '{agent_id}' not found", details={"agent_id": agent_id})

    async def create(self, data: ServiceCreate) -> Service:
        """
        Raises:
            AgentNotFound: ``agent_id`` was given and does not exist
        """
        if data.agent_id:
            await self._ensure_agent(data.agent_id)

        service = Service(**data.model_dump(exclude={"agent_id"}), agent_id=data.agent_id or None)
        service = await self.services.create(service)
        logger.info(f"Service created: {service.id} ({service.name})")
        return service

    async def update(self, service_id: str, data: ServiceUpdate) -> Service:
        """Apply the fields of ``data`` that are present and non-empty."""
        service = await self.get_by_id(service_id)

        for field in MUTABLE_FIELDS:
            value = getattr(data, field)
            if _is_provided(value):
                setattr(service, field, value)

        if _is_provided(data.agent_id):
            await self._ensure_agent(data.agent_id)
            service.agent_id = data.agent_id

        return await self.services.update(service)

    async def delete(self, service_id: str) -> None:
        await self.get_by_id(service_id)
        await self.services.delete(service_id)
        logger.info(f"Service deleted: {service_id}")

    async def register(self, data: ServiceRegistration, agent_id: str) -> Service:
        """
        Register a new service on behalf of the calling agent.

        ``agent_id`` is the agent resolved from the API key; whatever the
        body says about the owner is ignored. Services that already exist,
        under this name or any other, are never touched.
        """
        service = Service(**data.model_dump(include=set(MUTABLE_FIELDS)), agent_id=agent_id)
        service = await self.services.create(service)
        logger.info(f"Service {service.name} registered by agent {agent_id}")
        return service

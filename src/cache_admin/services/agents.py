"""Agent lifecycle: CRUD, API key rotation and health probes."""

import logging
from typing import Optional, Sequence

from cache_admin.api.schemas.agents import AgentCreate, AgentUpdate
from cache_admin.api.schemas.caches import PingResult
from cache_admin.auth.api_key import generate_api_key
from cache_admin.domain.exceptions import AgentNotFound
from cache_admin.infrastructure.agents import AgentClient
from cache_admin.infrastructure.database.models import Agent, Service
from cache_admin.interfaces import IRepository

logger = logging.getLogger(__name__)


class AgentService:
    """
    Business logic for agents.

    Agents are created with a freshly generated API key which they present
    back on callbacks. Rotating the key replaces it outright, so the old
    value stops authenticating on the next request.
    """

    def __init__(
        self,
        agents: IRepository[Agent],
        services: IRepository[Service],
        client: Optional[AgentClient] = None,
    ):
        self.agents = agents
        self.services = services
        self.client = client

    async def get_all(self) -> Sequence[Agent]:
        return await self.agents.get_all()

    async def get_by_id(self, agent_id: str) -> Agent:
        """
        Raises:
            AgentNotFound: No agent with this ID
        """
        agent = await self.agents.get_by_id(agent_id)
        if agent is None:
            raise AgentNotFound(f"Agent with ID '{agent_id}' not found", details={"agent_id": agent_id})
        return agent

    async def create(self, data: AgentCreate) -> Agent:
        agent = Agent(
            name=data.name,
            url=data.url,
            api_key=generate_api_key(),
            is_api_key_active=True,
        )
        agent = await self.agents.create(agent)
        logger.info(f"Agent created: {agent.id}")
        return agent

    async def update(self, agent_id: str, data: AgentUpdate) -> Agent:
        agent = await self.get_by_id(agent_id)
        agent.name = data.name
        agent.url = data.url
        return await self.agents.update(agent)

    async def delete(self, agent_id: str) -> None:
        await self.get_by_id(agent_id)
        await self.agents.delete(agent_id)
        logger.info(f"Agent deleted: {agent_id}")

    async def regenerate_api_key(self, agent_id: str) -> str:
        """
        Replace the agent's key and mark it active.

        Returns:
            The new API key
        """
        agent = await self.get_by_id(agent_id)
        agent.api_key = generate_api_key()
        agent.is_api_key_active = True
        agent = await self.agents.update(agent)
        logger.info(f"API key regenerated for agent {agent_id}")
        return agent.api_key

    async def get_active_by_api_key(self, api_key: str) -> Optional[Agent]:
        """Single lookup: key matches and is active."""
        if not api_key:
            return None
        return await self.agents.first(api_key=api_key, is_api_key_active=True)

    async def get_services(self, agent_id: str) -> Sequence[Service]:
        await self.get_by_id(agent_id)
        return await self.services.query(agent_id=agent_id)

    async def ping(self, agent_id: str) -> PingResult:
        """
        Probe the agent's health endpoint.

        Network failures come back inside the PingResult; only a missing
        agent raises.
        """
        if self.client is None:
            raise RuntimeError("AgentService was created without an AgentClient")

        agent = await self.get_by_id(agent_id)
        return await self.client.ping(agent)

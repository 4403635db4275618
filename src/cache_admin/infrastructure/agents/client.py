"""
HTTP client for agent APIs.

Every call carries the agent's own API key in ``X-Api-Key``. Cache calls
go to ``{agent.url}/api/cache/...`` and are deserialized into
``AgentResponse`` objects; health probes go to ``/api/HealthCheck``.
"""
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cache_admin.api.schemas.caches import AgentResponse, PingResult
from cache_admin.domain.exceptions import AgentRequestFailed
from cache_admin.infrastructure.database.models import Agent
from cache_admin.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-Api-Key"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _error_message(response: httpx.Response) -> Optional[str]:
    """Pull ``error`` (or ``message``) out of a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    return None


class AgentClient:
    """
    Relays requests to agents over a shared ``httpx.AsyncClient``.

    No retries: one request per call. Transport errors, non-2xx statuses
    and unreadable bodies on cache calls raise AgentRequestFailed.
    """

    def __init__(self, http: httpx.AsyncClient, ping_timeout: float = 5.0):
        self.http = http
        self.ping_timeout = ping_timeout

    @staticmethod
    def base_url(agent: Agent) -> str:
        return agent.url.rstrip("/")

    @staticmethod
    def _headers(agent: Agent) -> dict[str, str]:
        return {API_KEY_HEADER: agent.api_key, "Accept": "application/json"}

    def _cache_url(self, agent: Agent, service_name: str, *segments: str) -> str:
        path = "/".join(quote(part, safe="") for part in (service_name, *segments))
        return f"{self.base_url(agent)}/api/cache/{path}"

    async def ping(self, agent: Agent) -> PingResult:
        """Probe ``/api/HealthCheck``. Never raises for network problems."""
        url = f"{self.base_url(agent)}/api/HealthCheck"
        start = time.perf_counter()

        try:
            response = await self.http.get(url, headers=self._headers(agent), timeout=self.ping_timeout)
        except httpx.TimeoutException:
            logger.warning("Agent ping timed out", agent_id=agent.id, url=url)
            return PingResult(
                success=False,
                status_code=408,
                message="Agent did not respond within timeout period",
                response_time=_elapsed_ms(start),
            )
        except httpx.HTTPError as e:
            logger.warning("Agent ping failed", agent_id=agent.id, url=url, error=str(e))
            return PingResult(
                success=False,
                status_code=503,
                message=f"Failed to reach agent: {e}",
                response_time=_elapsed_ms(start),
            )

        return PingResult(
            success=response.is_success,
            status_code=response.status_code,
            message=None if response.is_success else _error_message(response),
            response_time=_elapsed_ms(start),
        )

    async def get_all_caches(self, agent: Agent, service_name: str) -> list[AgentResponse]:
        return await self._request("GET", agent, self._cache_url(agent, service_name))

    async def get_cache_by_key(
        self,
        agent: Agent,
        service_name: str,
        key: str,
        node_id: Optional[str] = None,
    ) -> list[AgentResponse]:
        params = {"id": node_id} if node_id else None
        return await self._request("GET", agent, self._cache_url(agent, service_name, key), params=params)

    async def flush_all(self, agent: Agent, service_name: str) -> list[AgentResponse]:
        return await self._request("POST", agent, self._cache_url(agent, service_name, "flushall"))

    async def clear_by_key(self, agent: Agent, service_name: str, key: str) -> list[AgentResponse]:
        return await self._request("DELETE", agent, self._cache_url(agent, service_name, key))

    async def _request(
        self,
        method: str,
        agent: Agent,
        url: str,
        params: Optional[dict[str, Any]] = None,
    ) -> list[AgentResponse]:
        start = time.perf_counter()
        context = {"agent_id": agent.id, "method": method, "url": url}

        try:
            response = await self.http.request(method, url, headers=self._headers(agent), params=params)
        except httpx.HTTPError as e:
            logger.error("Agent request failed", **context, error=str(e))
            raise AgentRequestFailed(
                f"Failed to reach agent: {e}",
                details={"agent_id": agent.id},
            ) from e

        logger.info(
            "Agent request completed",
            **context,
            status_code=response.status_code,
            duration_ms=_elapsed_ms(start),
        )

        if not response.is_success:
            raise AgentRequestFailed(
                f"Agent returned status {response.status_code}",
                details={
                    "agent_id": agent.id,
                    "upstream_status": response.status_code,
                    "upstream_error": _error_message(response),
                },
            )

        if not response.content:
            return []

        try:
            body = response.json()
        except ValueError as e:
            raise AgentRequestFailed(
                "Agent returned a response that is not valid JSON",
                details={"agent_id": agent.id},
            ) from e

        if body is None:
            return []
        if isinstance(body, dict):
            body = [body]

        try:
            return [AgentResponse.model_validate(item) for item in body]
        except (ValidationError, TypeError) as e:
            raise AgentRequestFailed(
                "Agent response has an unexpected shape",
                details={"agent_id": agent.id},
            ) from e

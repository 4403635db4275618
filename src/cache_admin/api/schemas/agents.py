"""Agent request and response bodies."""

from datetime import datetime

from pydantic import Field

from cache_admin.api.schemas.base import ApiModel
from cache_admin.api.schemas.types import Url


class AgentCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["eu-west cache agent"])
    url: Url = Field(..., description="Base address of the agent's HTTP API", examples=["https://agent.example.com"])


class AgentUpdate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    url: Url


class AgentRead(ApiModel):
    """
    Stored agent as returned to admins.

    The API key is included: admins need it to configure the agent.
    """

    id: str
    name: str
    url: str
    api_key: str
    is_api_key_active: bool
    created_at: datetime
    updated_at: datetime


class ApiKeyRotated(ApiModel):
    """Result of ``POST /api/agents/{id}/regenerate-api-key``."""

    api_key: str = Field(..., description="New key; the previous one no longer authenticates")

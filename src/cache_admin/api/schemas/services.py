"""Service request and response bodies."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from cache_admin.api.schemas.base import ApiModel
from cache_admin.api.schemas.types import ServiceName


class ServiceFields(ApiModel):
    """Optional descriptive fields shared by every service body."""

    status: Optional[str] = Field(None, max_length=64, examples=["Running"])
    version: Optional[str] = Field(None, max_length=64, examples=["1.4.2"])
    description: Optional[str] = None
    port: Optional[int] = Field(None, ge=0, le=65535)


class ServiceCreate(ServiceFields):
    name: ServiceName
    agent_id: Optional[str] = Field(None, description="Agent that owns the service; must exist")


class ServiceUpdate(ServiceFields):
    """Only fields that are present and non-empty are applied."""

    name: Optional[ServiceName] = None
    agent_id: Optional[str] = None


class ServiceRegistration(ServiceFields):
    """
    Body of ``POST /api/callback/register-service``.

    ``agent_id`` is accepted for compatibility with older agents but never
    used: the owner is always the agent that presented the API key.
    """

    name: ServiceName
    agent_id: Optional[str] = None


class ServiceRead(ApiModel):
    id: str
    name: str
    status: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    port: Optional[int] = None
    agent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

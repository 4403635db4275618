"""User, profile and service-link bodies."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from cache_admin.api.schemas.base import ApiModel
from cache_admin.api.schemas.types import Email, Password, ServiceName
from cache_admin.domain.roles import Role


class UserCreate(ApiModel):
    email: Email
    password: Password
    role: Role = Role.USER
    linked_service_names: list[ServiceName] = Field(default_factory=list)


class UserUpdate(ApiModel):
    """Fields left out are unchanged."""

    email: Optional[Email] = None
    password: Optional[Password] = None
    role: Optional[Role] = None
    linked_service_names: Optional[list[ServiceName]] = None


class UserRead(ApiModel):
    """User as returned by the API. The password hash never leaves the service."""

    id: str
    email: str
    role: Role
    linked_service_names: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ServiceLink(ApiModel):
    """Link one service by name."""

    service_name: ServiceName


class ServiceLinks(ApiModel):
    """Replace the whole list of linked services."""

    service_names: list[ServiceName] = Field(default_factory=list)

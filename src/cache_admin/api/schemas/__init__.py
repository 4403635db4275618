"""Shared API schemas."""

from cache_admin.api.schemas.agents import AgentCreate, AgentRead, AgentUpdate, ApiKeyRotated
from cache_admin.api.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from cache_admin.api.schemas.base import ApiModel
from cache_admin.api.schemas.caches import AgentResponse, ParametersDetails, PingResult
from cache_admin.api.schemas.errors import (
    ErrorCode,
    ErrorDetail,
    FieldError,
)
from cache_admin.api.schemas.services import (
    ServiceCreate,
    ServiceRead,
    ServiceRegistration,
    ServiceUpdate,
)
from cache_admin.api.schemas.users import (
    ServiceLink,
    ServiceLinks,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "ApiModel",
    "AgentCreate",
    "AgentRead",
    "AgentResponse",
    "AgentUpdate",
    "ApiKeyRotated",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "ParametersDetails",
    "PingResult",
    "ServiceCreate",
    "ServiceLink",
    "ServiceLinks",
    "ServiceRead",
    "ServiceRegistration",
    "ServiceUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "ErrorCode",
    "ErrorDetail",
    "FieldError",
]

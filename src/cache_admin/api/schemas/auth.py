"""Login and registration bodies."""

from pydantic import Field

from cache_admin.api.schemas.base import ApiModel
from cache_admin.api.schemas.types import Email, LoginPassword, Password
from cache_admin.domain.roles import Role


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=1, max_length=254, examples=["admin@example.com"])
    password: LoginPassword


class LoginResponse(ApiModel):
    token: str = Field(..., description="Bearer token for the Authorization header")
    email: str


class RegisterRequest(ApiModel):
    email: Email
    password: Password
    role: Role = Role.USER

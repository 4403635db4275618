"""
Pydantic models for authentication.

TokenPayload mirrors the JWT claims this service issues; UserInfo is the
authenticated caller handed to route handlers.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from cache_admin.domain.roles import Role


class TokenPayload(BaseModel):
    """Decoded and validated JWT claims."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    sub: str = Field(..., description="Subject identifier (user ID)", min_length=1)
    email: str = Field(..., description="User email address")
    role: Role = Field(..., description="User role at the time of issue")
    exp: int = Field(..., description="Expiration time as Unix timestamp", gt=0)
    iat: int = Field(..., description="Issued at time as Unix timestamp", gt=0)
    iss: str = Field(..., description="Issuer identifier", min_length=1)
    aud: str | list[str] = Field(..., description="Audience")

    @property
    def expires_in(self) -> int:
        """Seconds until the token expires (negative if already expired)."""
        return int(self.exp - datetime.now(timezone.utc).timestamp())


class UserInfo(BaseModel):
    """Authenticated user derived from a bearer token."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., description="User ID", min_length=1)
    email: str = Field(..., description="User email address")
    role: Role = Field(..., description="User role")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    @classmethod
    def from_token(cls, payload: TokenPayload) -> "UserInfo":
        return cls(id=payload.sub, email=payload.email, role=payload.role)

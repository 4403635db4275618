"""
FastAPI authentication and authorization dependencies.

Usage:
    Any authenticated user:
        >>> @router.get("/profile")
        >>> async def profile(user: CurrentUser):
        ...     return {"id": user.id}

    Role-based access:
        >>> @router.post("/agents")
        >>> async def create_agent(user: AdminUser):
        ...     ...

        >>> @router.delete("/services/{id}")
        >>> async def delete_service(user: UserInfo = Depends(require_roles(Role.ADMIN, Role.MANAGER))):
        ...     ...
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from cache_admin.auth.schemas import UserInfo
from cache_admin.auth.tokens import decode_access_token
from cache_admin.config.settings import Settings, get_settings
from cache_admin.domain.exceptions import AuthError, InsufficientPermissions
from cache_admin.domain.roles import Role


# auto_error=False so a missing token goes through our own 401 envelope
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/auth/login",
    auto_error=False,
)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> UserInfo:
    """
    Validate the bearer token and return the caller.

    The user is also placed on ``request.state.user`` so request logging can
    attribute the call.

    Raises:
        AuthError: 401 if the token is missing
        TokenExpired: 401 if the token has expired
        TokenInvalid: 401 for a bad signature, issuer, audience or claims
    """
    if not token:
        raise AuthError("Not authenticated")

    payload = decode_access_token(token, settings)
    user = UserInfo.from_token(payload)
    request.state.user = user
    return user


class RoleChecker:
    """
    FastAPI dependency for role-based access control.

    Passes the authenticated user through when their role is one of
    ``allowed_roles``.

    Example:
        >>> managers = RoleChecker([Role.ADMIN, Role.MANAGER])
        >>>
        >>> @router.post("/services")
        >>> async def create_service(user: UserInfo = Depends(managers)):
        ...     ...
    """

    def __init__(self, allowed_roles: list[Role]):
        self.allowed_roles = set(allowed_roles)

    async def __call__(self, user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if user.role not in self.allowed_roles:
            raise InsufficientPermissions(
                details={
                    "required_roles": sorted(role.value for role in self.allowed_roles),
                    "role": user.role.value,
                }
            )
        return user


def require_roles(*roles: Role) -> RoleChecker:
    """Shorthand for ``RoleChecker(list(roles))``."""
    return RoleChecker(list(roles))


CurrentUser = Annotated[UserInfo, Depends(get_current_user)]
AdminUser = Annotated[UserInfo, Depends(require_roles(Role.ADMIN))]
ManagerUser = Annotated[UserInfo, Depends(require_roles(Role.ADMIN, Role.MANAGER))]

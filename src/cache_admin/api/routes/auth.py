"""
Authentication routes.

    POST /api/auth/login     - exchange email and password for a bearer token
    POST /api/auth/register  - create a user (Admin only)
"""

from fastapi import APIRouter, status

from cache_admin.api.dependencies import AuthServiceDep
from cache_admin.api.schemas import LoginRequest, LoginResponse, RegisterRequest, UserRead
from cache_admin.auth.dependencies import AdminUser

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    responses={
        401: {"description": "Unknown email or wrong password"},
    },
)
async def login(body: LoginRequest, auth: AuthServiceDep) -> LoginResponse:
    """
    Issue a signed bearer token for the user.

    The token carries the user id, email and role and expires after
    ``JWT_EXPIRE_HOURS``. Send it back as ``Authorization: Bearer <token>``.
    """
    return await auth.login(body.email, body.password)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses={
        400: {"description": "Email already registered"},
        403: {"description": "Caller is not an Admin"},
    },
)
async def register(body: RegisterRequest, auth: AuthServiceDep, admin: AdminUser) -> UserRead:
    user = await auth.create_user(body)
    return UserRead.model_validate(user)

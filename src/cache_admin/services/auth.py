"""Login and bootstrap user creation."""

import logging

from cache_admin.api.schemas.auth import LoginResponse, RegisterRequest
from cache_admin.api.schemas.users import UserCreate
from cache_admin.auth.passwords import verify_password
from cache_admin.auth.tokens import create_access_token
from cache_admin.config.settings import Settings
from cache_admin.domain.exceptions import InvalidCredentials
from cache_admin.infrastructure.database.models import User
from cache_admin.services.users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserService, settings: Settings):
        self.users = users
        self.settings = settings

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Exchange credentials for a bearer token.

        Unknown email and wrong password fail the same way so callers cannot
        probe which accounts exist.

        Raises:
            InvalidCredentials: 401, no token issued
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentials()

        token = create_access_token(user, self.settings)
        logger.info(f"Login succeeded for user {user.id}")
        return LoginResponse(token=token, email=user.email)

    async def create_user(self, data: RegisterRequest) -> User:
        """
        Raises:
            DuplicateEmail: An account with this email exists
        """
        return await self.users.create(
            UserCreate(email=data.email, password=data.password, role=data.role)
        )

"""Startup seeding."""

import logging

from cache_admin.api.schemas.users import UserCreate
from cache_admin.config.settings import Settings
from cache_admin.domain.exceptions import DuplicateEmail
from cache_admin.domain.roles import Role
from cache_admin.infrastructure.storage import open_repositories
from cache_admin.services.users import UserService

logger = logging.getLogger(__name__)


async def seed_admin(settings: Settings) -> bool:
    """
    Create the configured Admin account if it does not exist yet.

    Returns:
        True when a user was created
    """
    if not settings.bootstrap_admin_email or settings.bootstrap_admin_password is None:
        return False

    async with open_repositories() as repos:
        users = UserService(repos.users, repos.services, settings.bcrypt_rounds)
        try:
            await users.create(
                UserCreate(
                    email=settings.bootstrap_admin_email,
                    password=settings.bootstrap_admin_password.get_secret_value(),
                    role=Role.ADMIN,
                )
            )
        except DuplicateEmail:
            logger.info("Bootstrap admin already exists, skipping")
            return False

    logger.info("Bootstrap admin created")
    return True

"""Users, their roles and the services they are linked to."""

import logging
from typing import Iterable, Optional, Sequence

from cache_admin.api.schemas.users import UserCreate, UserUpdate
from cache_admin.auth.passwords import BCRYPT_ROUNDS, hash_password
from cache_admin.auth.schemas import UserInfo
from cache_admin.domain.exceptions import (
    DuplicateEmail,
    ServiceAccessDenied,
    ServiceAlreadyLinked,
    ServiceNotFound,
    ServiceNotLinked,
    UserNotFound,
)
from cache_admin.domain.roles import Role
from cache_admin.infrastructure.database.models import Service, User
from cache_admin.interfaces import IRepository

logger = logging.getLogger(__name__)


def _unique(names: Iterable[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence."""
    return list(dict.fromkeys(names))


class UserService:
    """
    Business logic for users.

    Access to a service is granted by name: Admin users see everything,
    everyone else only the services listed in ``linked_service_names``.
    """

    def __init__(
        self,
        users: IRepository[User],
        services: IRepository[Service],
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ):
        self.users = users
        self.services = services
        self.bcrypt_rounds = bcrypt_rounds

    async def get_all(self) -> Sequence[User]:
        return await self.users.get_all()

    async def get_by_id(self, user_id: str) -> User:
        """
        Raises:
            UserNotFound: No user with this ID
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User with ID '{user_id}' not found", details={"user_id": user_id})
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.users.first(email=email)

    async def _validate_service_names(self, names: Sequence[str]) -> list[str]:
        names = _unique(names)
        if not names:
            return names

        found = {service.name for service in await self.services.query(name__in=names)}
        missing = [name for name in names if name not in found]
        if missing:
            raise ServiceNotFound(
                f"Service '{missing[0]}' not found",
                details={"service_names": missing},
            )
        return names

    async def create(self, data: UserCreate) -> User:
        """
        Raises:
            DuplicateEmail: The email is already registered
            ServiceNotFound: A linked service name does not exist
        """
        if await self.get_by_email(data.email) is not None:
            raise DuplicateEmail(details={"email": data.email})

        linked = await self._validate_service_names(data.linked_service_names)
        user = User(
            email=data.email,
            password_hash=hash_password(data.password, self.bcrypt_rounds),
            role=data.role.value,
            linked_service_names=linked,
        )
        user = await self.users.create(user)
        logger.info(f"User created: {user.id} ({user.role})")
        return user

    async def update(self, user_id: str, data: UserUpdate) -> User:
        """
        Raises:
            UserNotFound: No user with this ID
            DuplicateEmail: The new email belongs to another user
        """
        user = await self.get_by_id(user_id)

        if data.email and data.email != user.email:
            if await self.users.first(email=data.email, id__ne=user_id) is not None:
                raise DuplicateEmail(details={"email": data.email})
            user.email = data.email

        if data.password:
            user.password_hash = hash_password(data.password, self.bcrypt_rounds)

        if data.role is not None:
            user.role = data.role.value

        if data.linked_service_names is not None:
            user.linked_service_names = await self._validate_service_names(data.linked_service_names)

        return await self.users.update(user)

    async def delete(self, user_id: str) -> None:
        await self.get_by_id(user_id)
        await self.users.delete(user_id)
        logger.info(f"User deleted: {user_id}")

    async def get_linked_services(self, user_id: str) -> list[Service]:
        """Linked services in link order. Names that no longer resolve are skipped."""
        user = await self.get_by_id(user_id)
        if not user.linked_service_names:
            return []

        by_name = {
            service.name: service
            for service in await self.services.query(name__in=user.linked_service_names)
        }
        return [by_name[name] for name in user.linked_service_names if name in by_name]

    async def link_service(self, user_id: str, service_name: str) -> User:
        """
        Raises:
            ServiceNotFound: No service with this name
            ServiceAlreadyLinked: The user already has it
        """
        user = await self.get_by_id(user_id)
        if await self.services.first(name=service_name) is None:
            raise ServiceNotFound(f"Service '{service_name}' not found", details={"service_name": service_name})
        if service_name in user.linked_service_names:
            raise ServiceAlreadyLinked(details={"service_name": service_name})

        user.linked_service_names = [*user.linked_service_names, service_name]
        return await self.users.update(user)

    async def unlink_service(self, user_id: str, service_name: str) -> User:
        """
        Raises:
            ServiceNotLinked: The user does not have it
        """
        user = await self.get_by_id(user_id)
        if service_name not in user.linked_service_names:
            raise ServiceNotLinked(details={"service_name": service_name})

        user.linked_service_names = [name for name in user.linked_service_names if name != service_name]
        return await self.users.update(user)

    async def replace_linked_services(self, user_id: str, service_names: Sequence[str]) -> User:
        user = await self.get_by_id(user_id)
        user.linked_service_names = await self._validate_service_names(service_names)
        return await self.users.update(user)

    async def accessible_service_names(self, caller: UserInfo) -> Optional[set[str]]:
        """Names the caller may act on, or None for unrestricted (Admin)."""
        if caller.role == Role.ADMIN:
            return None
        user = await self.users.get_by_id(caller.id)
        if user is None:
            return set()
        return set(user.linked_service_names)

    async def ensure_access(self, caller: UserInfo, service: Service) -> None:
        """
        Raises:
            ServiceAccessDenied: Non-admin caller not linked to ``service``
        """
        allowed = await self.accessible_service_names(caller)
        if allowed is not None and service.name not in allowed:
            raise ServiceAccessDenied(details={"service_id": service.id})

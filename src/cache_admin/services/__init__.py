"""Domain services: one per stored type plus the cache relay."""

from cache_admin.services.agents import AgentService
from cache_admin.services.auth import AuthService
from cache_admin.services.caches import CacheService
from cache_admin.services.services import ServiceService
from cache_admin.services.users import UserService

__all__ = [
    "AgentService",
    "AuthService",
    "CacheService",
    "ServiceService",
    "UserService",
]

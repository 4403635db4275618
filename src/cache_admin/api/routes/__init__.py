"""API routers."""

from cache_admin.api.routes import agents, auth, caches, callback, health, profile, services, users

__all__ = ["agents", "auth", "caches", "callback", "health", "profile", "services", "users"]

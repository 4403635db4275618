"""Configuration management for the cache admin service."""

from cache_admin.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]

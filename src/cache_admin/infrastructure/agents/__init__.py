"""Outbound calls to cache agents."""
from .client import API_KEY_HEADER, AgentClient

__all__ = [
    "API_KEY_HEADER",
    "AgentClient",
]

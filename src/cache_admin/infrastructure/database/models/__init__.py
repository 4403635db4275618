"""Stored document types."""
from .agent import Agent
from .service import Service
from .user import User

ALL_MODELS = (User, Agent, Service)

__all__ = [
    "Agent",
    "Service",
    "User",
    "ALL_MODELS",
]

# tests/factories/__init__.py
"""Factory Boy factories for creating test documents."""

from tests.factories.base import DocumentFactory
from tests.factories.documents import DEFAULT_PASSWORD, AgentFactory, ServiceFactory, UserFactory

__all__ = ["DocumentFactory", "AgentFactory", "ServiceFactory", "UserFactory", "DEFAULT_PASSWORD"]

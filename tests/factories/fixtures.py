# tests/factories/fixtures.py
"""
Factory fixtures for pytest integration.

Loaded via pytest_plugins in conftest.py. Each fixture stores documents in
its own committed unit of work, the way a previous request would have.
"""

from typing import Any, Awaitable, Callable

import pytest

from cache_admin.infrastructure.database.models import Agent, Service, User
from cache_admin.infrastructure.storage import open_repositories
from tests.factories.documents import AgentFactory, ServiceFactory, UserFactory


@pytest.fixture
def create_user(database) -> Callable[..., Awaitable[User]]:
    """
    Usage:
        async def test_something(create_user):
            admin = await create_user(admin=True)
    """

    async def _create(**kwargs: Any) -> User:
        async with open_repositories() as repos:
            return await UserFactory.create_async(repos.users, **kwargs)

    return _create


@pytest.fixture
def create_agent(database) -> Callable[..., Awaitable[Agent]]:
    async def _create(**kwargs: Any) -> Agent:
        async with open_repositories() as repos:
            return await AgentFactory.create_async(repos.agents, **kwargs)

    return _create


@pytest.fixture
def create_service(database) -> Callable[..., Awaitable[Service]]:
    async def _create(**kwargs: Any) -> Service:
        async with open_repositories() as repos:
            return await ServiceFactory.create_async(repos.services, **kwargs)

    return _create

# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Test settings via environment variables (set before the app is imported)
- A fresh in-memory SQLite document store per test
- The FastAPI app driven through httpx ASGITransport
- A fake agent behind httpx.MockTransport that records outbound calls
- Users with bearer tokens for each role
"""

import os

os.environ.update(
    {
        "ENVIRONMENT": "local",
        "STORAGE_BACKEND": "sql",
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "JWT_SECRET_KEY": "test-secret-key-for-testing-only-not-for-production",
        "JWT_ISSUER": "cache-admin-test",
        "BCRYPT_ROUNDS": "4",
        "LOG_LEVEL": "40",  # ERROR level to reduce noise in tests
        "BOOTSTRAP_ADMIN_EMAIL": "",
    }
)

from typing import AsyncGenerator, Callable

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cache_admin.api.app import create_app
from cache_admin.auth.tokens import create_access_token
from cache_admin.config.settings import Settings, get_settings
from cache_admin.infrastructure.database import DatabaseManager, db
from cache_admin.infrastructure.database.models import User

get_settings.cache_clear()


# ============================================================================
# Pytest Configuration
# ============================================================================

pytest_plugins = ["tests.factories.fixtures"]


# ============================================================================
# Settings and Configuration
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def database(test_settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """
    Connect the global DatabaseManager to a fresh in-memory database.

    Every test that touches storage gets empty tables; the engine is
    disposed afterwards, which discards the database.
    """
    await db.connect(url=test_settings.database_url.get_secret_value())
    await db.create_tables()

    yield db

    await db.disconnect()


# ============================================================================
# Fake agent
# ============================================================================

class FakeAgent:
    """
    Stands in for every remote agent.

    Records each outbound request and answers with ``handler``, which tests
    replace to shape the agent's reply.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json=[])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def reply(self, status_code: int = 200, **kwargs) -> None:
        """Answer every following request with the same response."""
        self.handler = lambda request: httpx.Response(status_code, **kwargs)


@pytest.fixture
def fake_agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
async def agent_http(fake_agent: FakeAgent) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_agent)) as client:
        yield client


# ============================================================================
# FastAPI Application and Client
# ============================================================================

@pytest.fixture
def app(database: DatabaseManager, agent_http: httpx.AsyncClient) -> FastAPI:
    """
    Fresh app instance wired to the test database and the fake agent.

    ASGITransport does not run the lifespan, so the state it would set up
    is provided here.
    """
    application = create_app()
    application.state.http_client = agent_http
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(client, admin_headers):
            response = await client.get("/api/agents", headers=admin_headers)
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


# ============================================================================
# Authentication Fixtures
# ============================================================================

@pytest.fixture
def bearer(test_settings: Settings) -> Callable[[User], dict]:
    """Authorization headers for a stored user."""

    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user, test_settings)}"}

    return _headers


@pytest.fixture
async def admin_user(create_user) -> User:
    return await create_user(email="admin@example.com", admin=True)


@pytest.fixture
async def manager_user(create_user) -> User:
    return await create_user(email="manager@example.com", manager=True)


@pytest.fixture
async def regular_user(create_user) -> User:
    return await create_user(email="user@example.com")


@pytest.fixture
def admin_headers(admin_user: User, bearer) -> dict:
    return bearer(admin_user)


@pytest.fixture
def manager_headers(manager_user: User, bearer) -> dict:
    return bearer(manager_user)


@pytest.fixture
def user_headers(regular_user: User, bearer) -> dict:
    return bearer(regular_user)

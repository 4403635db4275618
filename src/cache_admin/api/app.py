# src/cache_admin/api/app.py
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cache_admin.api.middleware.api_key import ApiKeyValidationMiddleware
from cache_admin.api.middleware.cors import get_cors_middleware_config
from cache_admin.api.middleware.errors import register_error_handlers
from cache_admin.api.middleware.logging import RequestLoggingMiddleware
from cache_admin.api.middleware.request_id import RequestIDMiddleware
from cache_admin.api.middleware.security import SecurityHeadersMiddleware
from cache_admin.api.routes import agents, auth, caches, callback, health, profile, services, users
from cache_admin.config.settings import Settings, get_settings
from cache_admin.infrastructure.cosmos import cosmos
from cache_admin.infrastructure.database import db
from cache_admin.infrastructure.database.models import ALL_MODELS
from cache_admin.infrastructure.observability.logging import configure_logging
from cache_admin.services.bootstrap import seed_admin

logger = logging.getLogger(__name__)


async def connect_storage(settings: Settings) -> None:
    """Open the configured document store and make sure its tables or containers exist."""
    if settings.storage_backend == "cosmos":
        if settings.cosmos_connection_string is None:
            raise RuntimeError("STORAGE_BACKEND=cosmos requires COSMOS_CONNECTION_STRING")
        await cosmos.connect(
            connection_string=settings.cosmos_connection_string.get_secret_value(),
            database_name=settings.cosmos_database_name,
            models=ALL_MODELS,
            offer_throughput=settings.cosmos_throughput,
        )
        return

    if settings.database_url is None:
        raise RuntimeError("STORAGE_BACKEND=sql requires DATABASE_URL")

    await db.connect(
        url=settings.database_url.get_secret_value(),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
        echo_sql=settings.db_echo_sql,
    )
    if settings.db_create_tables:
        await db.create_tables()


async def disconnect_storage() -> None:
    if cosmos.is_connected:
        await cosmos.disconnect()
    if db.is_connected:
        await db.disconnect()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    configure_logging()

    await connect_storage(settings)
    logger.info(f"Storage ready (backend={settings.storage_backend})")

    # One pooled client for every outbound agent call
    app.state.http_client = httpx.AsyncClient(timeout=settings.agent_request_timeout)

    await seed_admin(settings)

    yield

    await app.state.http_client.aclose()
    await disconnect_storage()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# Cache Admin API

Control plane for remote cache agents.

- **Agents** are processes that own cache data. Each one is issued an API key.
- **Services** are registered by agents (or admins) and belong to one agent.
- **Caches** are never stored here: cache requests are relayed live to the
  agent that owns the service.

## Authentication

1. **Bearer token** for people, from `POST /api/auth/login`:
   ```
   Authorization: Bearer <token>
   ```

2. **API key** for agents calling `/api/callback/*`:
   ```
   X-Api-Key: <agent api key>
   ```
        """,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Liveness and readiness probes."},
            {"name": "Authentication", "description": "Login and user registration."},
            {"name": "Agents", "description": "Agent management, API key rotation and health pings. Admin only."},
            {"name": "Services", "description": "Service registry. Non-admins only see linked services."},
            {"name": "Caches", "description": "Cache operations relayed to the owning agent."},
            {"name": "Users", "description": "User management and service links. Admin only."},
            {"name": "Profile", "description": "The authenticated user's own account and links."},
            {"name": "Callback", "description": "Endpoints called by agents with their API key."},
        ],
    )

    # Middleware (order matters - added in reverse order of execution)
    # The API key gate runs innermost so its rejections are logged and carry a request ID
    app.add_middleware(ApiKeyValidationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    cors_config = get_cors_middleware_config(settings)
    app.add_middleware(CORSMiddleware, **cors_config)

    register_error_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router)
    app.include_router(agents.router)
    app.include_router(services.router)
    app.include_router(caches.router)
    app.include_router(users.router)
    app.include_router(profile.router)
    app.include_router(callback.router)

    return app


app = create_app()

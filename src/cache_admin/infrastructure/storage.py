"""Backend-neutral access to the document repositories."""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from cache_admin.config.settings import get_settings
from cache_admin.infrastructure.cosmos import CosmosDocumentRepository, cosmos
from cache_admin.infrastructure.database import db
from cache_admin.infrastructure.database.models import Agent, Service, User
from cache_admin.infrastructure.database.repositories import SqlDocumentRepository
from cache_admin.interfaces import IRepository


@dataclass
class Repositories:
    """One repository per document type, sharing a unit of work where the backend has one."""

    users: IRepository[User]
    agents: IRepository[Agent]
    services: IRepository[Service]


@asynccontextmanager
async def open_repositories() -> AsyncIterator[Repositories]:
    """
    Open repositories for the configured ``storage_backend``.

    With the SQL backend all three repositories share one session, committed
    when the block exits cleanly and rolled back otherwise. Cosmos writes are
    applied immediately.
    """
    settings = get_settings()

    if settings.storage_backend == "cosmos":
        yield Repositories(
            users=CosmosDocumentRepository(User, cosmos.container(User.__tablename__)),
            agents=CosmosDocumentRepository(Agent, cosmos.container(Agent.__tablename__)),
            services=CosmosDocumentRepository(Service, cosmos.container(Service.__tablename__)),
        )
        return

    async with db.session() as session:
        yield Repositories(
            users=SqlDocumentRepository(User, session),
            agents=SqlDocumentRepository(Agent, session),
            services=SqlDocumentRepository(Service, session),
        )


async def storage_health_check() -> bool:
    settings = get_settings()
    if settings.storage_backend == "cosmos":
        return await cosmos.health_check()
    return await db.health_check()

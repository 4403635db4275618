# src/cache_admin/infrastructure/database/connection.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine, AsyncEngine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
import logging

from cache_admin.domain.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages the async SQL engine backing the document repositories.

    Features:
    - Configurable connection pooling (size, overflow, timeout, recycle)
    - SQLite support with a single shared connection (StaticPool)
    - Table creation for local runs and tests
    - Automatic session management with commit/rollback

    Usage:
        db = DatabaseManager()
        await db.connect(url="postgresql+asyncpg://...", pool_size=5)
        await db.create_tables()
        async with db.session() as session:
            # use session
        await db.disconnect()
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._pool_size: int = 5
        self._max_overflow: int = 10

    async def connect(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo_sql: bool = False,
    ) -> None:
        """
        Connect to the database.

        Pool arguments are ignored for SQLite URLs, which always use one
        shared connection so in-memory databases survive across sessions.

        Raises:
            RuntimeError: If already connected
        """
        if self._engine is not None:
            raise RuntimeError("Database already connected")

        self._pool_size = pool_size
        self._max_overflow = max_overflow

        engine_kwargs: Dict[str, Any] = {"echo": echo_sql}
        if url.startswith("sqlite"):
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
            )

        self._engine = create_async_engine(url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info(
            "Database connected",
            extra={
                "dialect": self._engine.dialect.name,
                "pool_size": pool_size,
                "max_overflow": max_overflow,
            }
        )

    async def create_tables(self) -> None:
        """Create every document table that does not exist yet."""
        if not self._engine:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured")

    async def drop_tables(self) -> None:
        if not self._engine:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    async def disconnect(self) -> None:
        """Dispose of the engine. Safe to call multiple times."""
        if self._engine:
            logger.info("Disconnecting from database and cleaning up connections")
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session with automatic commit/rollback.

        Connection-level failures surface as DatabaseError so the API maps
        them to 503; every other exception is re-raised unchanged.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except OperationalError as e:
                await session.rollback()
                logger.error(f"Database operation failed: {e}")
                raise DatabaseError(details={"reason": str(e.orig)}) from e
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Run ``SELECT 1``. Returns False instead of raising."""
        if not self._engine:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._engine is not None


# Global instance
db = DatabaseManager()

"""Database configuration and connection management."""

import asyncio
from collections.abc import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.core.exceptions import DatabaseConnectionException
from app.models import metadata

logger = structlog.get_logger()


class Database:
    """
    Process-wide handle to the record store.

    The engine is created on first use, verified with a round trip and then
    reused for the lifetime of the process. A failed attempt leaves the
    handle uninitialized so that the next caller tries again.
    """

    def __init__(self, url: str, create_tables: bool = False, echo: bool = False):
        """Initialize an unconnected handle."""
        self.url = url
        self.create_tables = create_tables
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        """Whether a verified engine is currently held."""
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        options: dict = {"echo": self.echo}
        if not self.url.startswith("sqlite"):
            options.update(pool_pre_ping=True, pool_size=10, max_overflow=20, pool_recycle=3600)
        return create_async_engine(self.url, **options)

    async def get_engine(self) -> AsyncEngine:
        """
        Get the shared engine, connecting on first use.

        Raises:
            DatabaseConnectionException: If the store cannot be reached
        """
        if self._engine is not None:
            return self._engine

        async with self._lock:
            if self._engine is not None:
                return self._engine

            engine = self._create_engine()
            try:
                async with engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                    if self.create_tables:
                        await conn.run_sync(metadata.create_all)
            except (SQLAlchemyError, OSError) as e:
                await engine.dispose()
                logger.error("database_connection_failed", error=str(e))
                raise DatabaseConnectionException(str(e)) from e

            self._engine = engine
            self._sessionmaker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("database_connected", dialect=engine.dialect.name)
            return engine

    async def session(self) -> AsyncSession:
        """Open a new session on the shared engine."""
        await self.get_engine()
        if self._sessionmaker is None:
            raise DatabaseConnectionException("database handle was disposed")
        return self._sessionmaker()

    async def check_connection(self) -> bool:
        """Check if database connection is healthy."""
        try:
            engine = await self.get_engine()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (DatabaseConnectionException, SQLAlchemyError, OSError):
            return False

    async def dispose(self) -> None:
        """Close pooled connections and return to the uninitialized state."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None


database = Database(
    settings.async_database_url,
    create_tables=settings.database_create_tables,
    echo=settings.debug,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    session = await database.session()
    async with session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

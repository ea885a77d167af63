"""Async engine and session factory for PostgreSQL."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portal.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the engine with the pool and statement bounds from settings.

    A store that cannot hand out a connection within ``pool_timeout`` or
    finish a statement within ``command_timeout`` surfaces as an error
    instead of stalling a login.
    """
    database = settings.database
    return create_async_engine(
        database.url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
        connect_args={"command_timeout": database.command_timeout},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions that keep loaded rows usable after commit and only flush explicitly."""
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

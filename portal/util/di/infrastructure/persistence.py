"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from portal.config import Settings
from portal.domain.repository import SessionRepository, UnitOfWork, UserRepository
from portal.persistence.database import create_engine, create_session_factory
from portal.persistence.repository import (
    PostgresSessionRepository,
    PostgresUnitOfWork,
    PostgresUserRepository,
)
from portal.util.di.base import ProviderBase
from portal.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL persistence.

    One engine per container, one session per request. The repositories
    and the unit of work of a request share that session, so a use case
    commits everything it touched at once.
    """

    __is_mock__ = False

    user_repository = provide(
        PostgresUserRepository, provides=UserRepository, scope=Scope.REQUEST
    )
    session_repository = provide(
        PostgresSessionRepository, provides=SessionRepository, scope=Scope.REQUEST
    )
    unit_of_work = provide(
        PostgresUnitOfWork, provides=UnitOfWork, scope=Scope.REQUEST
    )

    @provide(scope=Scope.APP)
    async def engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Engine for the container's lifetime, disposed when it closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Request session.

        Use cases commit through the unit of work. Whatever is still
        pending when the request ends is committed here, or rolled back
        if the request raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Request session rolled back", error=str(e))
                await session.rollback()
                raise

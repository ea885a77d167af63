"""PostgreSQL unit of work."""

from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.repository import UnitOfWork
from portal.persistence.error import store_errors


class PostgresUnitOfWork(UnitOfWork):
    """Commits or rolls back the request's database session.

    The repositories of one request share this session, so a commit
    here makes all of their writes durable together.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        with store_errors("commit"):
            await self.session.commit()

    async def rollback(self) -> None:
        with store_errors("rollback"):
            await self.session.rollback()

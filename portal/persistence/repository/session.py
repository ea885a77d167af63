"""PostgreSQL implementation of Session repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.model import Session
from portal.domain.repository import SessionRepository
from portal.domain.value import ExternalId, SessionId
from portal.persistence.error import store_errors
from portal.persistence.mappers import row_to_session, session_to_dict
from portal.persistence.tables import sessions_table


class PostgresSessionRepository(SessionRepository):
    """PostgreSQL implementation of SessionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save(self, session: Session) -> Session:
        """Insert a session, or move its expiry if it already exists."""
        stmt = insert(sessions_table).values(**session_to_dict(session))
        stmt = stmt.on_conflict_do_update(
            index_elements=[sessions_table.c.id],
            set_={"expires_at": stmt.excluded.expires_at},
        )
        with store_errors("sessions.save"):
            await self.session.execute(stmt)
            await self.session.flush()
        return session

    async def find_by_id(self, session_id: SessionId) -> Optional[Session]:
        """Find a session by ID."""
        stmt = select(sessions_table).where(sessions_table.c.id == session_id)
        with store_errors("sessions.find_by_id"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_session(dict(row)) if row else None

    async def delete(self, session_id: SessionId) -> None:
        """Delete a session if it exists."""
        stmt = sessions_table.delete().where(sessions_table.c.id == session_id)
        with store_errors("sessions.delete"):
            await self.session.execute(stmt)
            await self.session.flush()

    async def delete_all_for_external_id(self, external_id: ExternalId) -> int:
        """Delete all sessions of an external id.

        Returns:
            Number of sessions deleted
        """
        stmt = sessions_table.delete().where(
            sessions_table.c.external_id == external_id.root
        )
        with store_errors("sessions.delete_all_for_external_id"):
            result = await self.session.execute(stmt)
            await self.session.flush()
        return result.rowcount

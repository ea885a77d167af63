"""In-memory session repository for testing."""

from typing import Optional

from portal.domain.model import Session
from portal.domain.repository import SessionRepository
from portal.domain.value import ExternalId, SessionId


class InMemorySessionRepository(SessionRepository):
    """In-memory implementation of SessionRepository for testing."""

    def __init__(self) -> None:
        self._sessions: dict[SessionId, Session] = {}

    async def save(self, session: Session) -> Session:
        """Save session."""
        self._sessions[session.id] = session
        return session

    async def find_by_id(self, session_id: SessionId) -> Optional[Session]:
        """Find session by ID."""
        return self._sessions.get(session_id)

    async def delete(self, session_id: SessionId) -> None:
        """Delete session."""
        self._sessions.pop(session_id, None)

    async def delete_all_for_external_id(self, external_id: ExternalId) -> int:
        """Delete all sessions for an external id."""
        doomed = [s.id for s in self._sessions.values() if s.external_id == external_id]
        for session_id in doomed:
            del self._sessions[session_id]
        return len(doomed)

    def snapshot(self) -> dict[SessionId, Session]:
        return dict(self._sessions)

    def restore(self, snapshot: dict[SessionId, Session]) -> None:
        self._sessions = dict(snapshot)

    def count(self) -> int:
        return len(self._sessions)

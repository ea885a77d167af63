"""Session repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from portal.domain.model import Session
from portal.domain.value import ExternalId, SessionId


class SessionRepository(ABC):
    """Pluggable backend for server-side sessions."""

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Save a session (create or update expiry).

        Args:
            session: The session to save

        Returns:
            The saved session
        """
        pass

    @abstractmethod
    async def find_by_id(self, session_id: SessionId) -> Optional[Session]:
        """Find a session by ID.

        Args:
            session_id: The session's unique identifier

        Returns:
            The session if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, session_id: SessionId) -> None:
        """Delete a session. Deleting a missing session is a no-op.

        Args:
            session_id: The session to delete
        """
        pass

    @abstractmethod
    async def delete_all_for_external_id(self, external_id: ExternalId) -> int:
        """Delete every session bound to an external id.

        Args:
            external_id: The provider's stable identifier

        Returns:
            Number of sessions deleted
        """
        pass

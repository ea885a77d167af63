"""Logout use case."""

from pydantic import BaseModel

from portal.domain.repository import UnitOfWork
from portal.domain.service import SessionManager


class LogoutRequest(BaseModel):
    """Logout request."""

    token: str | None = None


class LogoutUseCase:
    """Use case for revoking the caller's session."""

    def __init__(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> None:
        self.session_manager = session_manager
        self.unit_of_work = unit_of_work

    async def execute(self, request: LogoutRequest) -> None:
        """Revoke the session. Idempotent for missing or unknown tokens.

        Raises:
            StoreUnavailable: If the revocation cannot be stored
        """
        try:
            await self.session_manager.invalidate(request.token)
            await self.unit_of_work.commit()
        except Exception:
            await self.unit_of_work.rollback()
            raise

"""Refresh session use case."""

from pydantic import BaseModel

from portal.domain.model import Unauthenticated
from portal.domain.repository import UnitOfWork
from portal.domain.service import SessionManager
from portal.domain.value import UnauthenticatedReason


class RefreshSessionRequest(BaseModel):
    """Refresh session request."""

    token: str | None = None


class RefreshSessionResponse(BaseModel):
    """Refresh session response.

    ``token`` is the renewed token, or None with ``reason`` explaining
    why the session could not be renewed.
    """

    token: str | None = None
    reason: UnauthenticatedReason | None = None


class RefreshSessionUseCase:
    """Use case for sliding a valid session's expiry forward."""

    def __init__(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> None:
        self.session_manager = session_manager
        self.unit_of_work = unit_of_work

    async def execute(self, request: RefreshSessionRequest) -> RefreshSessionResponse:
        """Renew the session behind the token.

        Raises:
            StoreUnavailable: If the extended session cannot be stored
        """
        try:
            renewed = await self.session_manager.renew(request.token)
            await self.unit_of_work.commit()
        except Exception:
            await self.unit_of_work.rollback()
            raise

        if isinstance(renewed, Unauthenticated):
            return RefreshSessionResponse(reason=renewed.reason)
        return RefreshSessionResponse(token=renewed)

"""Get current user use case."""

import logfire
from pydantic import BaseModel

from portal.domain.error import StoreUnavailable
from portal.domain.model import Unauthenticated
from portal.domain.repository import UnitOfWork
from portal.domain.service import SessionManager
from portal.domain.value import UnauthenticatedReason

from .common import UserProfile


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str | None = None  # Session cookie value, if any


class GetCurrentUserResponse(BaseModel):
    """Get current user response.

    Exactly one of ``user`` and ``reason`` is set.
    """

    user: UserProfile | None = None
    reason: UnauthenticatedReason | None = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None


class GetCurrentUserUseCase:
    """Use case for resolving the session cookie to the current user."""

    def __init__(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> None:
        """Initialize get current user use case.

        Args:
            session_manager: Session domain service
            unit_of_work: Transaction boundary for the request
        """
        self.session_manager = session_manager
        self.unit_of_work = unit_of_work

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user flow.

        Resolving may clean up expired or dangling sessions; that cleanup
        is committed here. Never raises.

        Args:
            request: Request with the session token

        Returns:
            The user profile, or the reason the request is unauthenticated
        """
        resolved = await self.session_manager.resolve(request.token)

        if isinstance(resolved, Unauthenticated):
            if resolved.reason == UnauthenticatedReason.STORE_UNAVAILABLE:
                await self._rollback()
            else:
                await self._commit()
            return GetCurrentUserResponse(reason=resolved.reason)

        await self._commit()
        return GetCurrentUserResponse(user=UserProfile.from_record(resolved))

    async def _commit(self) -> None:
        try:
            await self.unit_of_work.commit()
        except StoreUnavailable as e:
            # Only session cleanup is lost; the resolution itself stands
            logfire.warn("Session cleanup not committed", error=str(e))
            await self._rollback()

    async def _rollback(self) -> None:
        try:
            await self.unit_of_work.rollback()
        except StoreUnavailable as e:
            logfire.warn("Rollback after store failure failed", error=str(e))

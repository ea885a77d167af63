"""Remove user use case."""

import logfire
from pydantic import BaseModel

from portal.domain.repository import UnitOfWork
from portal.domain.service import UserService
from portal.domain.value import ExternalId


class RemoveUserRequest(BaseModel):
    """Remove user request."""

    external_id: str


class RemoveUserResponse(BaseModel):
    """Remove user response."""

    external_id: str
    sessions_revoked: int


class RemoveUserUseCase:
    """Administrative use case deleting a user record and its sessions."""

    def __init__(self, user_service: UserService, unit_of_work: UnitOfWork) -> None:
        """Initialize remove user use case.

        Args:
            user_service: User domain service
            unit_of_work: Transaction boundary
        """
        self.user_service = user_service
        self.unit_of_work = unit_of_work

    async def execute(self, request: RemoveUserRequest) -> RemoveUserResponse:
        """Execute user removal.

        Steps:
        1. Revoke every session of the external id
        2. Delete the user record
        3. Commit both, or roll both back

        Raises:
            NotFoundError: If no record exists for the external id
            StoreUnavailable: If the store cannot be reached
        """
        external_id = ExternalId(request.external_id)

        with logfire.span("remove_user", external_id=external_id.root):
            try:
                revoked = await self.user_service.remove(external_id)
                await self.unit_of_work.commit()
            except Exception:
                await self.unit_of_work.rollback()
                raise

        return RemoveUserResponse(
            external_id=external_id.root, sessions_revoked=revoked
        )

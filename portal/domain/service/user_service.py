"""User domain service."""

import logfire

from portal.domain.error import NotFoundError
from portal.domain.model import UserRecord
from portal.domain.repository import SessionRepository, UserRepository
from portal.domain.value import ExternalId


class UserService:
    """Domain service for user record lookups and administration."""

    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User record repository
            session_repository: Session repository
        """
        self.user_repository = user_repository
        self.session_repository = session_repository

    async def get_by_external_id(self, external_id: ExternalId) -> UserRecord:
        """Get user record by external id.

        Args:
            external_id: The provider's stable identifier

        Returns:
            User record

        Raises:
            NotFoundError: If no record exists
        """
        with logfire.span(
            "user_service.get_by_external_id", external_id=external_id.root
        ):
            user = await self.user_repository.find_by_external_id(external_id)
            if not user:
                logfire.warn("User not found", external_id=external_id.root)
                raise NotFoundError("User", external_id.root)
            return user

    async def remove(self, external_id: ExternalId) -> int:
        """Delete a user record and revoke all of its sessions.

        Sessions are revoked first so no request can resolve a session
        for a record that is about to disappear.

        Args:
            external_id: The provider's stable identifier

        Returns:
            Number of sessions revoked

        Raises:
            NotFoundError: If no record exists
        """
        with logfire.span("user_service.remove", external_id=external_id.root):
            revoked = await self.session_repository.delete_all_for_external_id(
                external_id
            )
            deleted = await self.user_repository.delete_by_external_id(external_id)
            if not deleted:
                logfire.warn("User not found for removal", external_id=external_id.root)
                raise NotFoundError("User", external_id.root)

            logfire.info(
                "User removed",
                external_id=external_id.root,
                sessions_revoked=revoked,
            )
            return revoked

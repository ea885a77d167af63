"""PostgreSQL implementation of User repository."""

from typing import Optional

import logfire
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.error import DuplicateExternalIdError, NotFoundError
from portal.domain.model import UserRecord
from portal.domain.repository import UserRepository
from portal.domain.value import ExternalId
from portal.persistence.error import store_errors
from portal.persistence.mappers import row_to_user, user_to_dict
from portal.persistence.tables import USERS_EXTERNAL_ID_CONSTRAINT, users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_external_id(self, external_id: ExternalId) -> Optional[UserRecord]:
        """Find a user record by external id.

        Args:
            external_id: External id to look up

        Returns:
            UserRecord if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.external_id == external_id.root)
        with store_errors("users.find_by_external_id"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def insert(self, user: UserRecord) -> UserRecord:
        """Insert a new user record.

        The insert runs inside a SAVEPOINT so a uniqueness violation
        leaves the surrounding transaction usable for the follow-up update.

        Args:
            user: Record to insert

        Returns:
            The stored record

        Raises:
            DuplicateExternalIdError: If the external id is already taken
        """
        stmt = users_table.insert().values(**user_to_dict(user))
        try:
            with store_errors("users.insert"):
                try:
                    async with self.session.begin_nested():
                        await self.session.execute(stmt)
                except IntegrityError as e:
                    if USERS_EXTERNAL_ID_CONSTRAINT not in str(e.orig):
                        raise
                    raise DuplicateExternalIdError(user.external_id.root) from e
        except DuplicateExternalIdError:
            logfire.info(
                "External id uniqueness violated on insert",
                external_id=user.external_id.root,
            )
            raise
        return user

    async def update(self, user: UserRecord) -> UserRecord:
        """Overwrite display fields and last login for an external id.

        Args:
            user: Record carrying the new values

        Returns:
            The stored record after the update

        Raises:
            NotFoundError: If no record exists for the external id
        """
        values = user_to_dict(user)
        stmt = (
            users_table.update()
            .where(users_table.c.external_id == user.external_id.root)
            .values(
                display_name=values["display_name"],
                profile_url=values["profile_url"],
                avatar_small=values["avatar_small"],
                avatar_medium=values["avatar_medium"],
                avatar_large=values["avatar_large"],
                last_login_at=values["last_login_at"],
            )
            .returning(users_table)
        )
        with store_errors("users.update"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()

        if not row:
            raise NotFoundError("User", user.external_id.root)
        return row_to_user(dict(row))

    async def delete_by_external_id(self, external_id: ExternalId) -> bool:
        """Delete the record for an external id.

        Args:
            external_id: External id of the record to delete

        Returns:
            True if a record was deleted
        """
        stmt = users_table.delete().where(users_table.c.external_id == external_id.root)
        with store_errors("users.delete_by_external_id"):
            result = await self.session.execute(stmt)
            await self.session.flush()
        return result.rowcount > 0

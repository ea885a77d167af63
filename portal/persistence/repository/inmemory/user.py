"""In-memory user record repository for testing."""

from typing import Optional

from portal.domain.error import DuplicateExternalIdError, NotFoundError
from portal.domain.model import UserRecord
from portal.domain.repository import UserRepository
from portal.domain.value import ExternalId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Uniqueness of external id is enforced by the dict key, mirroring the
    unique constraint of the real store.
    """

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}

    async def find_by_external_id(self, external_id: ExternalId) -> Optional[UserRecord]:
        """Find user record by external id."""
        return self._users.get(external_id.root)

    async def insert(self, user: UserRecord) -> UserRecord:
        """Insert user record, rejecting a taken external id."""
        if user.external_id.root in self._users:
            raise DuplicateExternalIdError(user.external_id.root)
        self._users[user.external_id.root] = user
        return user

    async def update(self, user: UserRecord) -> UserRecord:
        """Overwrite mutable fields, keeping stored id and created_at."""
        stored = self._users.get(user.external_id.root)
        if stored is None:
            raise NotFoundError("User", user.external_id.root)

        updated = stored.model_copy(
            update={
                "display_name": user.display_name,
                "profile_url": user.profile_url,
                "avatar": user.avatar,
                "last_login_at": user.last_login_at,
            }
        )
        self._users[user.external_id.root] = updated
        return updated

    async def delete_by_external_id(self, external_id: ExternalId) -> bool:
        """Delete user record."""
        return self._users.pop(external_id.root, None) is not None

    def snapshot(self) -> dict[str, UserRecord]:
        return dict(self._users)

    def restore(self, snapshot: dict[str, UserRecord]) -> None:
        self._users = dict(snapshot)

    def count(self) -> int:
        return len(self._users)

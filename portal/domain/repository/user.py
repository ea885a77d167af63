"""User record repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from portal.domain.model import UserRecord
from portal.domain.value import ExternalId


class UserRepository(ABC):
    """Repository for the UserRecord aggregate.

    Implementations must enforce uniqueness of ``external_id`` in the
    store itself, not only in application code. Every method raises
    ``StoreUnavailable`` when the store cannot be reached.
    """

    @abstractmethod
    async def find_by_external_id(self, external_id: ExternalId) -> Optional[UserRecord]:
        """Find a user record by the provider's external id.

        Args:
            external_id: The provider's stable identifier

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, user: UserRecord) -> UserRecord:
        """Insert a new user record.

        Args:
            user: The record to insert

        Returns:
            The stored record

        Raises:
            DuplicateExternalIdError: If a record with the same external id exists
        """
        pass

    @abstractmethod
    async def update(self, user: UserRecord) -> UserRecord:
        """Overwrite the mutable fields of the record with the same external id.

        Only display name, profile URL, avatar and last login change;
        id and created_at stay as stored.

        Args:
            user: Record carrying the new field values

        Returns:
            The stored record after the update

        Raises:
            NotFoundError: If no record exists for the external id
        """
        pass

    @abstractmethod
    async def delete_by_external_id(self, external_id: ExternalId) -> bool:
        """Delete the record for an external id.

        Args:
            external_id: The provider's stable identifier

        Returns:
            True if a record was deleted, False if none existed
        """
        pass

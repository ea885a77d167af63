"""Identity reconciliation domain service."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from portal.domain.error import (
    DuplicateExternalIdError,
    NotFoundError,
    StoreUnavailable,
)
from portal.domain.model import UserRecord
from portal.domain.repository import UserRepository
from portal.domain.value import UserId, VerifiedAssertion


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IdentityReconciler:
    """Maps a verified identity onto exactly one local user record.

    Reconciliation is create-or-update keyed by external id. The store's
    unique constraint on external id is the only synchronization: when
    two first logins for the same external id race, one insert wins and
    the other observes ``DuplicateExternalIdError`` and falls back to an
    update of the winning record.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize identity reconciler.

        Args:
            user_repository: User record repository
            clock: Source of the current time (timezone-aware)
        """
        self.user_repository = user_repository
        self.clock = clock

    async def reconcile(self, assertion: VerifiedAssertion) -> UserRecord:
        """Create or refresh the user record for a verified identity.

        Steps:
        1. Look up the record by external id
        2. If absent, insert it with created_at = last_login_at = now
        3. If the insert lost a race, re-read the winner and continue with 4
        4. If present, overwrite display fields and advance last_login_at

        Args:
            assertion: Identity verified by the provider

        Returns:
            The canonical stored record

        Raises:
            StoreUnavailable: If the store cannot be reached or a write
                fails for any reason other than the uniqueness race
        """
        external_id = assertion.external_id

        with logfire.span(
            "identity_reconciler.reconcile", external_id=external_id.root
        ):
            existing = await self.user_repository.find_by_external_id(external_id)

            if existing is None:
                record = UserRecord.from_assertion(
                    UserId(uuid4()), assertion, self.clock()
                )
                try:
                    created = await self.user_repository.insert(record)
                except DuplicateExternalIdError:
                    logfire.info(
                        "Concurrent first login won the insert, updating instead",
                        external_id=external_id.root,
                    )
                    existing = await self.user_repository.find_by_external_id(
                        external_id
                    )
                    if existing is None:
                        # The winning row is gone again: nothing consistent to return
                        raise StoreUnavailable(
                            f"User record for {external_id} vanished during reconciliation"
                        )
                else:
                    logfire.info(
                        "User record created",
                        user_id=str(created.id),
                        external_id=external_id.root,
                    )
                    return created

            refreshed = existing.refreshed(
                assertion, self._next_login_time(existing.last_login_at)
            )
            try:
                updated = await self.user_repository.update(refreshed)
            except NotFoundError as e:
                raise StoreUnavailable(
                    f"User record for {external_id} vanished during reconciliation"
                ) from e

            logfire.info(
                "User record refreshed",
                user_id=str(updated.id),
                external_id=external_id.root,
            )
            return updated

    def _next_login_time(self, previous: datetime) -> datetime:
        """Current time, nudged forward so last_login_at always strictly advances."""
        now = self.clock()
        if now <= previous:
            return previous + timedelta(microseconds=1)
        return now

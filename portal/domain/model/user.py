"""User record aggregate.

A user record is the durable local identity behind a Steam login. It is
created on the first successful login for an external id and refreshed
on every login after that.
"""

from datetime import datetime

from pydantic import model_validator

from portal.domain.common import DomainModel
from portal.domain.value import ExternalId, UserId, VerifiedAssertion


class Avatar(DomainModel):
    """Avatar image URLs in the three sizes Steam serves."""

    small: str
    medium: str
    large: str


class UserRecord(DomainModel):
    """Canonical local user, keyed by the provider's external id.

    ``id`` and ``external_id`` and ``created_at`` never change once the
    record exists. Display fields and ``last_login_at`` follow the most
    recent login.
    """

    id: UserId
    external_id: ExternalId
    display_name: str
    profile_url: str
    avatar: Avatar
    created_at: datetime
    last_login_at: datetime

    @model_validator(mode="after")
    def check_login_not_before_creation(self) -> "UserRecord":
        """Ensure created_at <= last_login_at."""
        if self.last_login_at < self.created_at:
            raise ValueError("last_login_at cannot precede created_at")
        return self

    @classmethod
    def from_assertion(
        cls, user_id: UserId, assertion: VerifiedAssertion, now: datetime
    ) -> "UserRecord":
        """Build a brand-new record for a first login."""
        return cls(
            id=user_id,
            external_id=assertion.external_id,
            display_name=assertion.display_name,
            profile_url=assertion.profile_url,
            avatar=Avatar(
                small=assertion.avatar_small,
                medium=assertion.avatar_medium,
                large=assertion.avatar_large,
            ),
            created_at=now,
            last_login_at=now,
        )

    def refreshed(self, assertion: VerifiedAssertion, login_at: datetime) -> "UserRecord":
        """Return a copy with display fields and last login taken from a new login."""
        return self.model_copy(
            update={
                "display_name": assertion.display_name,
                "profile_url": assertion.profile_url,
                "avatar": Avatar(
                    small=assertion.avatar_small,
                    medium=assertion.avatar_medium,
                    large=assertion.avatar_large,
                ),
                "last_login_at": login_at,
            }
        )

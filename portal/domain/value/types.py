"""Domain value objects for the portal.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import field_validator

from portal.domain.common import DomainModel, StringValue


class ExternalId(StringValue):
    """The identity provider's stable identifier for a user.

    For Steam this is the 64-bit SteamID rendered as decimal text
    (e.g. "76561197960287930"). It is the sole natural key used to
    reconcile logins with local user records.
    """

    @field_validator("root")
    @classmethod
    def validate_external_id(cls, v: str) -> str:
        """Validate external id is non-empty and within length limits."""
        v = v.strip()
        if len(v) < 1 or len(v) > 64:
            raise ValueError("External id must be 1-64 characters")
        return v


class VerifiedAssertion(DomainModel):
    """Identity asserted by the provider for a single login attempt.

    Always fully populated. Consumed immediately by reconciliation and
    never persisted as-is.
    """

    external_id: ExternalId
    display_name: str
    profile_url: str
    avatar_small: str
    avatar_medium: str
    avatar_large: str


class UnauthenticatedReason(str, Enum):
    """Why a session did not resolve to a user."""

    NO_SESSION = "no_session"
    CORRUPTED = "corrupted"
    EXPIRED = "expired"
    REVOKED = "revoked"
    USER_REMOVED = "user_removed"
    STORE_UNAVAILABLE = "store_unavailable"

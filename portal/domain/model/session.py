"""Session entity and the unauthenticated resolution state."""

from datetime import datetime

from portal.domain.common import DomainModel
from portal.domain.value import ExternalId, SessionId, UnauthenticatedReason


class Session(DomainModel):
    """Server-side half of a login session.

    The client only holds a signed token naming this session and its
    external id. Deleting the session revokes the token.
    """

    id: SessionId
    external_id: ExternalId
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class Unauthenticated(DomainModel):
    """Resolved state meaning "no valid session".

    Returned instead of raising so protected routes can gate on it.
    """

    reason: UnauthenticatedReason

"""Domain value objects for the portal."""

from portal.domain.value.identifiers import SessionId, SessionToken, UserId
from portal.domain.value.types import (
    ExternalId,
    UnauthenticatedReason,
    VerifiedAssertion,
)

__all__ = [
    # Identifiers
    "UserId",
    "SessionId",
    "SessionToken",
    # Types
    "ExternalId",
    "VerifiedAssertion",
    "UnauthenticatedReason",
]

"""Domain model entities for the portal."""

from portal.domain.model.session import Session, Unauthenticated
from portal.domain.model.user import Avatar, UserRecord

__all__ = [
    "Avatar",
    "Session",
    "Unauthenticated",
    "UserRecord",
]

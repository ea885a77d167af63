"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from portal.domain.model import Avatar, Session, UserRecord
from portal.domain.value import ExternalId, SessionId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> UserRecord:
    """Convert database row to UserRecord domain model.

    Args:
        row: Database row as dict

    Returns:
        UserRecord domain model
    """
    return UserRecord(
        id=UserId(_uuid(row["id"])),
        external_id=ExternalId(row["external_id"]),
        display_name=row["display_name"],
        profile_url=row["profile_url"],
        avatar=Avatar(
            small=row["avatar_small"],
            medium=row["avatar_medium"],
            large=row["avatar_large"],
        ),
        created_at=row["created_at"],
        last_login_at=row["last_login_at"],
    )


def user_to_dict(user: UserRecord) -> Dict[str, Any]:
    """Convert UserRecord domain model to database dict.

    Args:
        user: UserRecord domain model

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": user.id,
        "external_id": user.external_id.root,
        "display_name": user.display_name,
        "profile_url": user.profile_url,
        "avatar_small": user.avatar.small,
        "avatar_medium": user.avatar.medium,
        "avatar_large": user.avatar.large,
        "created_at": user.created_at,
        "last_login_at": user.last_login_at,
    }


def row_to_session(row: Dict[str, Any]) -> Session:
    """Convert database row to Session domain model."""
    return Session(
        id=SessionId(_uuid(row["id"])),
        external_id=ExternalId(row["external_id"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


def session_to_dict(session: Session) -> Dict[str, Any]:
    """Convert Session domain model to database dict."""
    return {
        "id": session.id,
        "external_id": session.external_id.root,
        "created_at": session.created_at,
        "expires_at": session.expires_at,
    }

"""Response models shared by the authentication use cases."""

from datetime import datetime

from pydantic import BaseModel

from portal.domain.model import UserRecord


class UserProfile(BaseModel):
    """Public view of a user record."""

    user_id: str
    external_id: str
    display_name: str
    profile_url: str
    avatar_small: str
    avatar_medium: str
    avatar_large: str
    created_at: datetime
    last_login_at: datetime

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserProfile":
        return cls(
            user_id=str(user.id),
            external_id=user.external_id.root,
            display_name=user.display_name,
            profile_url=user.profile_url,
            avatar_small=user.avatar.small,
            avatar_medium=user.avatar.medium,
            avatar_large=user.avatar.large,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

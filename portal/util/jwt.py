"""Session token signing utilities."""

from datetime import datetime, timezone

import jwt
from pydantic import BaseModel

from portal.config import AuthSettings


class SessionTokenPayload(BaseModel):
    """Claims carried by a session token.

    Only the external id and the server-side session id travel to the
    client. Display fields are always reloaded from the store.
    """

    sub: str  # External (Steam) id
    sid: str  # Server-side session id
    iat: datetime
    exp: datetime


class JWTError(Exception):
    """Token is malformed, tampered with or signed with another key."""

    pass


class ExpiredTokenError(JWTError):
    """Token signature is valid but its expiry has passed."""

    pass


def create_token(
    external_id: str,
    session_id: str,
    expires_at: datetime,
    settings: AuthSettings,
) -> str:
    """Create a signed session token.

    Args:
        external_id: The user's external (Steam) id
        session_id: Server-side session id
        expires_at: Token expiry, normally the session expiry
        settings: Authentication settings

    Returns:
        Encoded token
    """
    payload = {
        "sub": external_id,
        "sid": session_id,
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
    }

    return jwt.encode(
        payload, settings.session_secret, algorithm=settings.session_algorithm
    )


def verify_token(
    token: str, settings: AuthSettings, verify_exp: bool = True
) -> SessionTokenPayload:
    """Verify and decode a session token.

    Args:
        token: Token to verify
        settings: Authentication settings
        verify_exp: Whether an expired token should be rejected

    Returns:
        Token payload if valid

    Raises:
        ExpiredTokenError: If the token has expired
        JWTError: If the token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"verify_exp": verify_exp, "require": ["sub", "sid", "exp"]},
        )
        return SessionTokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
    except ValueError:
        # Claims present but not of the expected shape
        raise JWTError("Invalid token payload")

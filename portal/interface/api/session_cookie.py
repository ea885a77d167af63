"""Session cookie handling shared by the auth and view routes."""

from fastapi import Request, Response

from portal.config import Settings


def read_session_token(request: Request, settings: Settings) -> str | None:
    """Return the session token carried by the request, if any."""
    return request.cookies.get(settings.auth.cookie_name)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token as an HTTP-only cookie.

    The cookie is marked secure only in production so local development
    works over plain HTTP. SameSite=Lax keeps it on the top-level
    redirect back from Steam.
    """
    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        max_age=settings.auth.session_ttl_days * 24 * 60 * 60,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Remove the session cookie with the same attributes it was set with."""
    response.delete_cookie(
        key=settings.auth.cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )

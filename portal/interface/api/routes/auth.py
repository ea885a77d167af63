"""Authentication routes."""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from portal.application.usecase.auth import (
    BeginLoginUseCase,
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
)
from portal.application.usecase.auth.common import UserProfile
from portal.application.usecase.auth.get_current_user import GetCurrentUserRequest
from portal.application.usecase.auth.login import LoginRequest
from portal.application.usecase.auth.logout import LogoutRequest
from portal.application.usecase.auth.refresh_session import RefreshSessionRequest
from portal.config import Settings
from portal.domain.error import StoreUnavailable, VerificationFailed
from portal.interface.api.session_cookie import (
    clear_session_cookie,
    read_session_token,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return current user if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: UserProfile | None = None


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class RefreshResponse(BaseModel):
    """Session refresh response."""

    success: bool


def error_redirect(code: str, detail: str, settings: Settings) -> RedirectResponse:
    """Redirect to the error view.

    The error detail is only included outside production.
    """
    params = {"error": code}
    if not settings.is_production:
        params["message"] = detail
    return RedirectResponse(
        url=f"/error?{urlencode(params)}", status_code=status.HTTP_302_FOUND
    )


@router.get("/steam")
async def steam_login(
    begin_login_use_case: FromDishka[BeginLoginUseCase],
    settings: FromDishka[Settings],
):
    """Start Steam login.

    Returns:
        HTTP 302 redirect to the Steam OpenID login page

    Example:
        GET /auth/steam

        Redirects to: https://steamcommunity.com/openid/login?openid.mode=checkid_setup&...
    """
    try:
        response = await begin_login_use_case.execute()
    except VerificationFailed as e:
        logger.error(f"Could not start Steam login: {e}")
        return error_redirect("login_unavailable", str(e), settings)

    logger.info("Redirecting to Steam for login")
    return RedirectResponse(
        url=response.redirect_url, status_code=status.HTTP_302_FOUND
    )


@router.get("/steam/return")
async def steam_return(
    request: Request,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
):
    """Handle the Steam OpenID callback and complete login.

    On success, sets the HTTP-only session cookie and redirects to the
    profile view. On any failure, redirects to the error view without
    setting a cookie.

    Returns:
        HTTP 302 redirect to /profile or /error
    """
    params = dict(request.query_params)
    logger.info(f"Steam callback received: mode={params.get('openid.mode')}")

    try:
        login_response = await login_use_case.execute(LoginRequest(params=params))
    except VerificationFailed as e:
        logger.warning(f"Steam verification failed: {e}")
        return error_redirect("auth_failed", str(e), settings)
    except StoreUnavailable as e:
        logger.error(f"Store unavailable during login: {e}")
        return error_redirect("store_unavailable", str(e), settings)
    except Exception as e:
        logger.exception(f"Unexpected error during Steam callback: {e}")
        return error_redirect("unexpected", str(e), settings)

    logger.info(f"Login successful for user: {login_response.user.external_id}")

    # Cookies must be set on the returned response object
    redirect_response = RedirectResponse(
        url="/profile", status_code=status.HTTP_302_FOUND
    )
    set_session_cookie(redirect_response, login_response.token, settings)
    return redirect_response


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    settings: FromDishka[Settings],
) -> AuthStatusResponse:
    """Get current user if authenticated, or return unauthenticated status.

    This endpoint is safe to call without authentication - it will return
    authenticated=false instead of raising an error.

    Examples:
        Authenticated:
        {
            "authenticated": true,
            "user": {
                "external_id": "76561197960287930",
                "display_name": "Rabscuttle",
                ...
            }
        }

        Unauthenticated:
        {
            "authenticated": false,
            "user": null
        }
    """
    result = await get_current_user_use_case.execute(
        GetCurrentUserRequest(token=read_session_token(request, settings))
    )
    if not result.authenticated:
        logger.debug(f"Unauthenticated request: {result.reason}")
    return AuthStatusResponse(authenticated=result.authenticated, user=result.user)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_session(
    request: Request,
    response: Response,
    refresh_session_use_case: FromDishka[RefreshSessionUseCase],
    settings: FromDishka[Settings],
) -> RefreshResponse:
    """Extend the current session and reissue its cookie.

    Raises:
        HTTPException: 401 if there is no valid session, 503 if the
            session store is unavailable
    """
    try:
        result = await refresh_session_use_case.execute(
            RefreshSessionRequest(token=read_session_token(request, settings))
        )
    except StoreUnavailable as e:
        logger.error(f"Store unavailable during refresh: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store unavailable",
        )

    if result.token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    set_session_cookie(response, result.token, settings)
    return RefreshResponse(success=True)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    logout_use_case: FromDishka[LogoutUseCase],
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Revoke the current session and clear the session cookie.

    Raises:
        HTTPException: 503 if the session store is unavailable
    """
    try:
        await logout_use_case.execute(
            LogoutRequest(token=read_session_token(request, settings))
        )
    except StoreUnavailable as e:
        logger.error(f"Store unavailable during logout: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store unavailable",
        )

    clear_session_cookie(response, settings)
    return LogoutResponse(success=True, message="Successfully logged out")

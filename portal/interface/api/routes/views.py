"""Page routes: landing, profile, error and browser logout."""

import logging
from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from portal.application.usecase.auth import GetCurrentUserUseCase, LogoutUseCase
from portal.application.usecase.auth.common import UserProfile
from portal.application.usecase.auth.get_current_user import GetCurrentUserRequest
from portal.application.usecase.auth.logout import LogoutRequest
from portal.config import Settings
from portal.domain.error import StoreUnavailable
from portal.interface.api.routes.auth import error_redirect
from portal.interface.api.session_cookie import clear_session_cookie, read_session_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["views"], route_class=DishkaRoute)

DEFAULT_DISPLAY_NAME = "Steam User"
DEFAULT_AVATAR = "/default-avatar.png"


class LandingView(BaseModel):
    """Landing page."""

    authenticated: bool
    login_url: str
    display_name: str | None = None


class ProfileView(BaseModel):
    """Profile page of the signed-in user."""

    external_id: str
    display_name: str
    profile_url: str
    avatar: str
    member_since: datetime
    last_login_at: datetime

    @classmethod
    def from_profile(cls, user: UserProfile) -> "ProfileView":
        return cls(
            external_id=user.external_id,
            display_name=user.display_name or DEFAULT_DISPLAY_NAME,
            profile_url=user.profile_url,
            avatar=user.avatar_large or DEFAULT_AVATAR,
            member_since=user.created_at,
            last_login_at=user.last_login_at,
        )


class ErrorView(BaseModel):
    """Error page shown after a failed login."""

    error: str
    message: str | None = None


@router.get("/", response_model=LandingView)
async def landing(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    settings: FromDishka[Settings],
) -> LandingView:
    """Landing page with the login entry point."""
    result = await get_current_user_use_case.execute(
        GetCurrentUserRequest(token=read_session_token(request, settings))
    )
    return LandingView(
        authenticated=result.authenticated,
        login_url="/auth/steam",
        display_name=(
            (result.user.display_name or DEFAULT_DISPLAY_NAME) if result.user else None
        ),
    )


@router.get("/profile", response_model=ProfileView)
async def profile(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    settings: FromDishka[Settings],
):
    """Profile of the signed-in user.

    Returns:
        Profile view, or HTTP 302 to / when not signed in
    """
    result = await get_current_user_use_case.execute(
        GetCurrentUserRequest(token=read_session_token(request, settings))
    )
    if result.user is None:
        logger.info(f"Profile requested without a session: {result.reason}")
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    return ProfileView.from_profile(result.user)


@router.get("/error", response_model=ErrorView)
async def error_view(
    settings: FromDishka[Settings],
    error: str = "unknown",
    message: str | None = None,
) -> ErrorView:
    """Error page echoing the failure code."""
    return ErrorView(
        error=error,
        message=None if settings.is_production else message,
    )


@router.get("/logout")
async def browser_logout(
    request: Request,
    logout_use_case: FromDishka[LogoutUseCase],
    settings: FromDishka[Settings],
):
    """Sign out from a browser link and return to the landing page."""
    try:
        await logout_use_case.execute(
            LogoutRequest(token=read_session_token(request, settings))
        )
    except StoreUnavailable as e:
        logger.error(f"Store unavailable during logout: {e}")
        return error_redirect("store_unavailable", str(e), settings)

    redirect_response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(redirect_response, settings)
    return redirect_response

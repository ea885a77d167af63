"""Unit tests for the session use cases: current user, refresh and logout."""

from dishka import AsyncContainer
import pytest

from portal.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
)
from portal.application.usecase.auth.get_current_user import GetCurrentUserRequest
from portal.application.usecase.auth.login import LoginRequest
from portal.application.usecase.auth.logout import LogoutRequest
from portal.application.usecase.auth.refresh_session import RefreshSessionRequest
from portal.domain.value import UnauthenticatedReason
from portal.persistence.repository.inmemory import InMemorySessionRepository
from tests.harness import STEAM_ID, create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

CALLBACK = {
    "openid.mode": "id_res",
    "openid.claimed_id": f"https://steamcommunity.com/openid/id/{STEAM_ID}",
}


async def login(container: AsyncContainer) -> str:
    login_use_case = await container.get(LoginUseCase)
    response = await login_use_case.execute(LoginRequest(params=CALLBACK))
    return response.token


class TestGetCurrentUserUseCase:
    """Tests for GetCurrentUserUseCase."""

    @pytest.mark.asyncio
    async def test_returns_profile_for_valid_session(self, unit_env):
        token = await login(unit_env)
        use_case = await unit_env.get(GetCurrentUserUseCase)

        response = await use_case.execute(GetCurrentUserRequest(token=token))

        assert response.authenticated
        assert response.user.external_id == STEAM_ID
        assert response.reason is None

    @pytest.mark.asyncio
    async def test_reports_reason_without_session(self, unit_env):
        use_case = await unit_env.get(GetCurrentUserUseCase)

        response = await use_case.execute(GetCurrentUserRequest())

        assert not response.authenticated
        assert response.user is None
        assert response.reason == UnauthenticatedReason.NO_SESSION


class TestLogoutUseCase:
    """Tests for LogoutUseCase."""

    @pytest.mark.asyncio
    async def test_revokes_session(self, unit_env):
        token = await login(unit_env)
        logout = await unit_env.get(LogoutUseCase)
        current_user = await unit_env.get(GetCurrentUserUseCase)
        sessions = await unit_env.get(InMemorySessionRepository)

        await logout.execute(LogoutRequest(token=token))

        response = await current_user.execute(GetCurrentUserRequest(token=token))
        assert response.reason == UnauthenticatedReason.REVOKED
        assert sessions.count() == 0

    @pytest.mark.asyncio
    async def test_without_token_is_a_no_op(self, unit_env):
        logout = await unit_env.get(LogoutUseCase)

        await logout.execute(LogoutRequest())


class TestRefreshSessionUseCase:
    """Tests for RefreshSessionUseCase."""

    @pytest.mark.asyncio
    async def test_issues_token_for_same_user(self, unit_env):
        token = await login(unit_env)
        refresh = await unit_env.get(RefreshSessionUseCase)
        current_user = await unit_env.get(GetCurrentUserUseCase)

        response = await refresh.execute(RefreshSessionRequest(token=token))

        assert response.token is not None
        me = await current_user.execute(GetCurrentUserRequest(token=response.token))
        assert me.user.external_id == STEAM_ID

    @pytest.mark.asyncio
    async def test_rejects_corrupted_token(self, unit_env):
        refresh = await unit_env.get(RefreshSessionUseCase)

        response = await refresh.execute(RefreshSessionRequest(token="garbage"))

        assert response.token is None
        assert response.reason == UnauthenticatedReason.CORRUPTED

"""End-to-end tests for the Steam login flow."""

from datetime import datetime
from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from portal.domain.error import StoreUnavailable
from portal.interface.api.app import create_app
from portal.persistence.repository.inmemory import (
    InMemorySessionRepository,
    InMemoryUserRepository,
)
from tests.di import build_test_container
from tests.harness import SESSION_SECRET, STEAM_ID

CLAIMED_ID = f"https://steamcommunity.com/openid/id/{STEAM_ID}"


def open_client(monkeypatch, environment: str = "test") -> TestClient:
    """Test client backed by a fully mocked container."""
    monkeypatch.setenv("ENVIRONMENT", environment)
    monkeypatch.setenv("AUTH__SESSION_SECRET", SESSION_SECRET)
    monkeypatch.setenv("AUTH__STEAM__API_KEY", "steam-web-api-key")
    return TestClient(create_app(build_test_container()), follow_redirects=False)


@pytest.fixture
def client(monkeypatch):
    with open_client(monkeypatch) as c:
        yield c


def steam_callback(client: TestClient, **params):
    """Simulate Steam redirecting the browser back to the portal."""
    query = {"openid.mode": "id_res", "openid.claimed_id": CLAIMED_ID}
    query.update(params)
    return client.get("/auth/steam/return", params=query)


def error_code(response) -> str:
    return parse_qs(urlsplit(response.headers["location"]).query)["error"][0]


class TestLogin:
    """Login redirect and callback."""

    def test_begin_redirects_to_steam(self, client):
        response = client.get("/auth/steam")

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://steamcommunity.com/openid/login")
        assert "mock=true" in location

    def test_callback_sets_cookie_and_redirects_to_profile(self, client):
        response = steam_callback(client)

        assert response.status_code == 302
        assert response.headers["location"] == "/profile"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("session=")
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()

    def test_cancelled_login_redirects_to_error_without_cookie(self, client):
        response = steam_callback(client, **{"openid.mode": "cancel"})

        assert response.status_code == 302
        assert response.headers["location"].startswith("/error?")
        assert error_code(response) == "auth_failed"
        assert "set-cookie" not in response.headers

    def test_repeat_login_keeps_one_user(self, client):
        """Logging in twice resolves to the same user record."""
        steam_callback(client)
        first = client.get("/auth/me").json()["user"]

        steam_callback(client)
        second = client.get("/auth/me").json()["user"]

        assert first["user_id"] == second["user_id"]
        assert first["created_at"] == second["created_at"]
        assert datetime.fromisoformat(second["last_login_at"]) > datetime.fromisoformat(
            first["last_login_at"]
        )


class TestSession:
    """Session resolution through the cookie."""

    def test_me_without_cookie_is_unauthenticated(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json() == {"authenticated": False, "user": None}

    def test_me_with_cookie_returns_user(self, client):
        steam_callback(client)

        data = client.get("/auth/me").json()

        assert data["authenticated"] is True
        assert data["user"]["external_id"] == STEAM_ID
        assert data["user"]["display_name"] == "Mock Steam User"

    def test_tampered_cookie_is_unauthenticated(self, client):
        client.cookies.set("session", "not-a-token")

        data = client.get("/auth/me").json()

        assert data["authenticated"] is False

    def test_refresh_without_cookie_is_unauthorized(self, client):
        response = client.post("/auth/refresh")

        assert response.status_code == 401

    def test_refresh_reissues_cookie(self, client):
        steam_callback(client)

        response = client.post("/auth/refresh")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert response.headers["set-cookie"].startswith("session=")
        assert client.get("/auth/me").json()["authenticated"] is True


class TestLogout:
    """Logout through the API and the browser link."""

    def test_api_logout_revokes_session(self, client):
        steam_callback(client)
        token = client.cookies.get("session")

        response = client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/auth/me").json()["authenticated"] is False

        # The old token no longer resolves even if the browser kept it
        client.cookies.set("session", token)
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_browser_logout_redirects_home(self, client):
        steam_callback(client)

        response = client.get("/logout")

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_logout_without_session_succeeds(self, client):
        response = client.post("/auth/logout")

        assert response.status_code == 200


class TestViews:
    """Landing, profile and error views."""

    def test_landing_offers_login(self, client):
        data = client.get("/").json()

        assert data == {
            "authenticated": False,
            "login_url": "/auth/steam",
            "display_name": None,
        }

    def test_landing_greets_signed_in_user(self, client):
        steam_callback(client)

        data = client.get("/").json()

        assert data["authenticated"] is True
        assert data["display_name"] == "Mock Steam User"

    def test_profile_requires_session(self, client):
        response = client.get("/profile")

        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_profile_shows_signed_in_user(self, client):
        steam_callback(client)

        response = client.get("/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["external_id"] == STEAM_ID
        assert data["avatar"] == "https://avatars.steamstatic.com/mock_full.jpg"
        assert data["profile_url"] == f"https://steamcommunity.com/profiles/{STEAM_ID}/"

    def test_error_view_echoes_code(self, client):
        response = client.get("/error", params={"error": "auth_failed", "message": "Denied"})

        assert response.status_code == 200
        assert response.json() == {"error": "auth_failed", "message": "Denied"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestLoginWithStoreDown:
    """A store failure during reconcile lands on the error view."""

    @pytest.fixture
    def stores(self, monkeypatch):
        """Make user inserts fail and record every session write."""
        stores = {"users": [], "sessions_saved": []}
        save_session = InMemorySessionRepository.save

        async def insert_fails(repo, user):
            stores["users"].append(repo)
            raise StoreUnavailable("connection refused")

        async def recording_save(repo, session):
            stores["sessions_saved"].append(session)
            return await save_session(repo, session)

        monkeypatch.setattr(InMemoryUserRepository, "insert", insert_fails)
        monkeypatch.setattr(InMemorySessionRepository, "save", recording_save)
        return stores

    @pytest.mark.parametrize("environment", ["test", "production"])
    def test_redirects_to_error_without_cookie(self, monkeypatch, stores, environment):
        with open_client(monkeypatch, environment) as client:
            response = steam_callback(client)

            assert response.status_code == 302
            assert response.headers["location"].startswith("/error?")
            assert error_code(response) == "store_unavailable"
            assert "set-cookie" not in response.headers
            assert client.get("/auth/me").json()["authenticated"] is False

        (users,) = stores["users"]
        assert users.count() == 0
        assert stores["sessions_saved"] == []

    def test_hides_detail_in_production(self, monkeypatch, stores):
        with open_client(monkeypatch, "production") as client:
            response = steam_callback(client)

        query = parse_qs(urlsplit(response.headers["location"]).query)
        assert query == {"error": ["store_unavailable"]}

    def test_shows_detail_outside_production(self, monkeypatch, stores):
        with open_client(monkeypatch, "development") as client:
            response = steam_callback(client)

        query = parse_qs(urlsplit(response.headers["location"]).query)
        assert query["message"] == ["connection refused"]

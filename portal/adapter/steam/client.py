"""Steam OpenID client implementation.

Completes Steam sign-in in two round-trips: an OpenID
``check_authentication`` request confirming the assertion, then a Steam
Web API ``GetPlayerSummaries`` call for the profile fields.
"""

from collections.abc import Mapping

import httpx
import logfire

from portal.adapter.steam.openid import (
    OpenIDMessageError,
    build_login_url,
    check_authentication_params,
    extract_steam_id,
    parse_key_value,
)
from portal.domain.service.identity_verifier import OpenIDClient, ProviderError
from portal.domain.value import ExternalId, VerifiedAssertion


class SteamOpenIDError(ProviderError):
    """Steam OpenID error."""

    pass


class SteamOpenIDClient(OpenIDClient):
    """Base class for Steam OpenID clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealSteamOpenIDClient(SteamOpenIDClient):
    """Steam OpenID 2.0 client backed by the Steam Web API."""

    def __init__(
        self,
        api_key: str,
        realm: str,
        return_url: str,
        openid_endpoint: str = "https://steamcommunity.com/openid/login",
        web_api_url: str = "https://api.steampowered.com",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Steam OpenID client.

        Args:
            api_key: Steam Web API key
            realm: Site identity presented to Steam
            return_url: Callback address assertions must be issued for
            openid_endpoint: Steam OpenID endpoint
            web_api_url: Steam Web API base URL
            timeout: Timeout in seconds for each Steam request
        """
        self.api_key = api_key
        self.realm = realm
        self.return_url = return_url
        self.openid_endpoint = openid_endpoint
        self.player_summaries_url = (
            f"{web_api_url}/ISteamUser/GetPlayerSummaries/v0002/"
        )
        self.timeout = timeout

    async def begin_auth(self, return_url: str) -> str:
        """Build the Steam login URL.

        Args:
            return_url: Callback address registered for this site

        Returns:
            Steam login URL to redirect the browser to
        """
        url = build_login_url(self.openid_endpoint, return_url, self.realm)

        logfire.info(
            "Steam OpenID login initiated", return_url=return_url, realm=self.realm
        )
        return url

    async def complete_auth(self, params: Mapping[str, str]) -> VerifiedAssertion:
        """Verify a Steam callback and fetch the player's profile.

        Args:
            params: Query parameters of Steam's redirect

        Returns:
            Verified identity with profile fields

        Raises:
            SteamOpenIDError: If the assertion is invalid, Steam rejects it,
                or Steam cannot be reached in time
        """
        try:
            steam_id = extract_steam_id(params, self.openid_endpoint, self.return_url)
        except OpenIDMessageError as e:
            raise SteamOpenIDError(str(e)) from e

        await self._check_authentication(params)
        player = await self._get_player_summary(steam_id)

        try:
            assertion = VerifiedAssertion(
                external_id=ExternalId(steam_id),
                display_name=player["personaname"],
                profile_url=player["profileurl"],
                avatar_small=player["avatar"],
                avatar_medium=player["avatarmedium"],
                avatar_large=player["avatarfull"],
            )
        except (KeyError, ValueError) as e:
            logfire.error("Steam player summary incomplete", steam_id=steam_id)
            raise SteamOpenIDError(f"Incomplete player summary for {steam_id}") from e

        logfire.info(
            "Steam OpenID completed",
            steam_id=steam_id,
            display_name=assertion.display_name,
        )
        return assertion

    async def _check_authentication(self, params: Mapping[str, str]) -> None:
        """Ask Steam to confirm the assertion signature (stateless mode).

        Raises:
            SteamOpenIDError: If Steam does not confirm the assertion
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.openid_endpoint,
                    data=check_authentication_params(params),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            logfire.error("Steam check_authentication timed out", error=str(e))
            raise SteamOpenIDError("Timed out verifying assertion with Steam") from e
        except httpx.HTTPError as e:
            logfire.error("Steam check_authentication HTTP error", error=str(e))
            raise SteamOpenIDError(f"HTTP error verifying assertion: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Steam check_authentication failed",
                status_code=response.status_code,
            )
            raise SteamOpenIDError(
                f"Assertion verification failed: {response.status_code}"
            )

        result = parse_key_value(response.text)
        if result.get("is_valid") != "true":
            logfire.warn("Steam rejected assertion")
            raise SteamOpenIDError("Steam rejected the assertion")

    async def _get_player_summary(self, steam_id: str) -> dict:
        """Fetch the player's public profile from the Steam Web API.

        Raises:
            SteamOpenIDError: If the request fails or the player is missing
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.player_summaries_url,
                    params={"key": self.api_key, "steamids": steam_id},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            logfire.error("Steam player summary timed out", error=str(e))
            raise SteamOpenIDError("Timed out fetching Steam profile") from e
        except httpx.HTTPError as e:
            logfire.error("Steam player summary HTTP error", error=str(e))
            raise SteamOpenIDError(f"HTTP error fetching Steam profile: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Steam player summary request failed",
                status_code=response.status_code,
            )
            raise SteamOpenIDError(
                f"Player summary request failed: {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            logfire.error("Steam player summary is not JSON", steam_id=steam_id)
            raise SteamOpenIDError(f"Malformed player summary for {steam_id}") from e

        payload = body.get("response") if isinstance(body, dict) else None
        players = payload.get("players") if isinstance(payload, dict) else None
        if not isinstance(players, list):
            logfire.error("Steam player summary has no player list", steam_id=steam_id)
            raise SteamOpenIDError(f"Malformed player summary for {steam_id}")

        for player in players:
            if isinstance(player, dict) and player.get("steamid") == steam_id:
                return player

        raise SteamOpenIDError(f"Steam returned no profile for {steam_id}")


class MockSteamOpenIDClient(SteamOpenIDClient):
    """Mock Steam OpenID client for testing.

    Returns deterministic profile data without network calls. A callback
    whose ``openid.claimed_id`` carries a SteamID logs in as that id;
    ``openid.mode=cancel`` is rejected like a real cancelled login.
    """

    DEFAULT_STEAM_ID = "76561197960287930"

    def __init__(self):
        """Initialize mock client without real Steam configuration."""
        pass

    async def begin_auth(self, return_url: str) -> str:
        """Return mock Steam login URL."""
        return f"https://steamcommunity.com/openid/login?return_to={return_url}&mock=true"

    async def complete_auth(self, params: Mapping[str, str]) -> VerifiedAssertion:
        """Return mock profile for the claimed SteamID.

        Raises:
            SteamOpenIDError: If the callback reports a cancelled login
        """
        if params.get("openid.mode") == "cancel":
            raise SteamOpenIDError("Login was cancelled at Steam")

        steam_id = params.get("openid.claimed_id", "").rsplit("/", 1)[-1]
        if not steam_id.isdigit():
            steam_id = self.DEFAULT_STEAM_ID

        return VerifiedAssertion(
            external_id=ExternalId(steam_id),
            display_name="Mock Steam User",
            profile_url=f"https://steamcommunity.com/profiles/{steam_id}/",
            avatar_small="https://avatars.steamstatic.com/mock.jpg",
            avatar_medium="https://avatars.steamstatic.com/mock_medium.jpg",
            avatar_large="https://avatars.steamstatic.com/mock_full.jpg",
        )

"""Steam infrastructure providers."""

from dishka import Scope, provide

from portal.adapter.steam import RealSteamOpenIDClient, SteamOpenIDClient
from portal.config import SteamSettings
from portal.util.di.base import ProviderBase


class SteamProvider(ProviderBase):
    """Steam component base."""

    __mock_component__ = "steam"


class ProdSteamProvider(SteamProvider):
    """Production Steam provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_steam_openid_client(self, steam: SteamSettings) -> SteamOpenIDClient:
        """Provide Steam OpenID client.

        Returns:
            Steam OpenID 2.0 client

        Raises:
            ValueError: If the Steam Web API key is not configured
        """
        if not steam.api_key:
            raise ValueError("Steam Web API key must be configured")

        return RealSteamOpenIDClient(
            api_key=steam.api_key,
            realm=steam.realm,
            return_url=steam.return_url,
            openid_endpoint=steam.openid_endpoint,
            web_api_url=steam.web_api_url,
            timeout=steam.timeout_seconds,
        )

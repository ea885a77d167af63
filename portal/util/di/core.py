"""Configuration providers."""

from dishka import Scope, provide

from portal.config import AuthSettings, Settings, SteamSettings
from portal.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings read once per container from the environment and .env."""

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Session signing and cookie settings."""
        return settings.auth

    @provide
    def provide_steam_settings(self, settings: Settings) -> SteamSettings:
        """Steam settings with return URL and realm already derived."""
        return settings.auth.steam

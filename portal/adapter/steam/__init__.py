"""Steam OpenID adapter."""

from .client import (
    MockSteamOpenIDClient,
    RealSteamOpenIDClient,
    SteamOpenIDClient,
    SteamOpenIDError,
)

__all__ = [
    "MockSteamOpenIDClient",
    "RealSteamOpenIDClient",
    "SteamOpenIDClient",
    "SteamOpenIDError",
]

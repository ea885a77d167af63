"""Dependency injection module."""

from portal.util.di.application import ProdApplicationProvider
from portal.util.di.base import Component, ProviderBase
from portal.util.di.core import ProdConfigProvider
from portal.util.di.domain import ProdDomainProvider
from portal.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
    ProdSteamProvider,
    SteamProvider,
)

# Assembly order of the container; component bases resolve to a subclass
PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    SteamProvider,
    PersistenceProvider,
]

__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "SteamProvider",
    "ProdPersistenceProvider",
    "ProdSteamProvider",
]

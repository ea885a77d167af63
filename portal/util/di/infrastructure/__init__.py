"""Infrastructure providers."""

# Import bases
from .persistence import PersistenceProvider
from .steam import SteamProvider

# Import implementations (needed for __subclasses__())
from .persistence import ProdPersistenceProvider  # noqa: F401
from .steam import ProdSteamProvider  # noqa: F401

__all__ = [
    "PersistenceProvider",
    "ProdPersistenceProvider",
    "ProdSteamProvider",
    "SteamProvider",
]

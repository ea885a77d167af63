"""Mock providers for testing."""

from .steam import MockSteamProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockSteamProvider",
    "MockPersistenceProvider",
    "build_test_container",
]

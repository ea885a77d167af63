"""In-memory repository implementations for testing."""

from .session import InMemorySessionRepository
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository

__all__ = [
    "InMemorySessionRepository",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
]

"""Repository interfaces for the portal domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from portal.domain.repository.session import SessionRepository
from portal.domain.repository.unit_of_work import UnitOfWork
from portal.domain.repository.user import UserRepository

__all__ = [
    "SessionRepository",
    "UnitOfWork",
    "UserRepository",
]

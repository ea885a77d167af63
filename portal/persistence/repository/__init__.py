"""PostgreSQL repository implementations."""

from portal.persistence.repository.session import PostgresSessionRepository
from portal.persistence.repository.unit_of_work import PostgresUnitOfWork
from portal.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresSessionRepository",
    "PostgresUnitOfWork",
    "PostgresUserRepository",
]

"""Unit tests for database error translation in the Postgres repositories.

A fake AsyncSession raises driver errors so no database is needed.
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from portal.domain.error import DuplicateExternalIdError, StoreUnavailable
from portal.domain.value import ExternalId, SessionId
from portal.persistence.repository import (
    PostgresSessionRepository,
    PostgresUnitOfWork,
    PostgresUserRepository,
)
from tests.harness import STEAM_ID, make_user


class _Savepoint:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FailingSession:
    """Stands in for AsyncSession; every statement raises ``error``."""

    def __init__(self, error: BaseException):
        self.error = error

    def begin_nested(self):
        return _Savepoint()

    async def execute(self, stmt):
        raise self.error

    async def flush(self):
        pass

    async def commit(self):
        raise self.error

    async def rollback(self):
        pass


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


class TestPostgresUserRepositoryErrors:
    """Tests for PostgresUserRepository error mapping."""

    @pytest.mark.asyncio
    async def test_unique_violation_is_duplicate_external_id(self):
        session = FailingSession(
            integrity_error(
                'duplicate key value violates unique constraint "uq_users_external_id"'
            )
        )
        repo = PostgresUserRepository(session)

        with pytest.raises(DuplicateExternalIdError) as exc_info:
            await repo.insert(make_user())

        assert exc_info.value.external_id == STEAM_ID

    @pytest.mark.asyncio
    async def test_other_integrity_error_is_store_unavailable(self):
        """Only the external id constraint signals the login race."""
        session = FailingSession(
            integrity_error('new row violates check constraint "ck_users_login_after_create"')
        )
        repo = PostgresUserRepository(session)

        with pytest.raises(StoreUnavailable):
            await repo.insert(make_user())

    @pytest.mark.asyncio
    async def test_connection_loss_is_store_unavailable(self):
        session = FailingSession(
            OperationalError("SELECT ...", {}, Exception("connection refused"))
        )
        repo = PostgresUserRepository(session)

        with pytest.raises(StoreUnavailable):
            await repo.find_by_external_id(ExternalId(STEAM_ID))

    @pytest.mark.asyncio
    async def test_timeout_is_store_unavailable(self):
        repo = PostgresUserRepository(FailingSession(TimeoutError()))

        with pytest.raises(StoreUnavailable):
            await repo.update(make_user())


class TestPostgresSessionRepositoryErrors:
    """Tests for PostgresSessionRepository error mapping."""

    @pytest.mark.asyncio
    async def test_os_error_is_store_unavailable(self):
        repo = PostgresSessionRepository(FailingSession(ConnectionResetError()))

        with pytest.raises(StoreUnavailable):
            await repo.find_by_id(SessionId(uuid4()))


class TestPostgresUnitOfWorkErrors:
    """Tests for PostgresUnitOfWork error mapping."""

    @pytest.mark.asyncio
    async def test_failed_commit_is_store_unavailable(self):
        uow = PostgresUnitOfWork(
            FailingSession(OperationalError("COMMIT", {}, Exception("server closed")))
        )

        with pytest.raises(StoreUnavailable):
            await uow.commit()

"""Unit tests for UserService."""

import pytest

from portal.config import AuthSettings
from portal.domain.error import NotFoundError
from portal.domain.service import SessionManager, UserService
from portal.domain.value import ExternalId, UnauthenticatedReason
from portal.persistence.repository.inmemory import (
    InMemorySessionRepository,
    InMemoryUserRepository,
)
from tests.harness import SESSION_SECRET, STEAM_ID, make_user


class TestRemove:
    """Tests for UserService.remove()."""

    @pytest.mark.asyncio
    async def test_removes_record_and_revokes_sessions(self):
        """Removed users should be logged out everywhere."""
        # Arrange
        users = InMemoryUserRepository()
        sessions = InMemorySessionRepository()
        manager = SessionManager(sessions, users, AuthSettings(session_secret=SESSION_SECRET))
        service = UserService(users, sessions)
        user = await users.insert(make_user())
        tokens = [await manager.establish(user) for _ in range(2)]
        other = await users.insert(make_user(external_id="76561198000000001"))
        other_token = await manager.establish(other)

        # Act
        revoked = await service.remove(ExternalId(STEAM_ID))

        # Assert
        assert revoked == 2
        assert users.count() == 1
        for token in tokens:
            resolved = await manager.resolve(token)
            assert resolved.reason == UnauthenticatedReason.REVOKED
        assert (await manager.resolve(other_token)).id == other.id

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self):
        service = UserService(InMemoryUserRepository(), InMemorySessionRepository())

        with pytest.raises(NotFoundError):
            await service.remove(ExternalId(STEAM_ID))


class TestGetByExternalId:
    """Tests for UserService.get_by_external_id()."""

    @pytest.mark.asyncio
    async def test_returns_stored_record(self):
        users = InMemoryUserRepository()
        user = await users.insert(make_user())
        service = UserService(users, InMemorySessionRepository())

        found = await service.get_by_external_id(ExternalId(STEAM_ID))

        assert found == user

    @pytest.mark.asyncio
    async def test_missing_record_raises_not_found(self):
        service = UserService(InMemoryUserRepository(), InMemorySessionRepository())

        with pytest.raises(NotFoundError):
            await service.get_by_external_id(ExternalId(STEAM_ID))

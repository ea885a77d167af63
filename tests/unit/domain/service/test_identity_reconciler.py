"""Unit tests for IdentityReconciler."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from portal.domain.error import DuplicateExternalIdError, StoreUnavailable
from portal.domain.service import IdentityReconciler
from portal.domain.value import ExternalId
from portal.persistence.repository.inmemory import InMemoryUserRepository
from tests.harness import make_assertion, make_user


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InterleavingUserRepository(InMemoryUserRepository):
    """Yields to the event loop after every lookup.

    Lets two concurrent first logins both observe "no record" before
    either inserts, which is the race the unique constraint arbitrates.
    """

    def __init__(self) -> None:
        super().__init__()
        self.insert_attempts = 0

    async def find_by_external_id(self, external_id):
        result = await super().find_by_external_id(external_id)
        await asyncio.sleep(0)
        return result

    async def insert(self, user):
        self.insert_attempts += 1
        return await super().insert(user)


class UnavailableUserRepository(InMemoryUserRepository):
    """Store that is reachable for reads but rejects every write."""

    def __init__(self, *existing) -> None:
        super().__init__()
        for user in existing:
            self._users[user.external_id.root] = user

    async def insert(self, user):
        raise StoreUnavailable("connection reset by peer")

    async def update(self, user):
        raise StoreUnavailable("connection reset by peer")


class PhantomDuplicateRepository(InMemoryUserRepository):
    """Reports a uniqueness violation but never shows the winning row."""

    async def insert(self, user):
        raise DuplicateExternalIdError(user.external_id.root)


class TestReconcileFirstLogin:
    """Tests for reconcile() when no record exists yet."""

    @pytest.mark.asyncio
    async def test_creates_record_with_equal_timestamps(self):
        """First login should create a record with created_at == last_login_at."""
        # Arrange
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        repo = InMemoryUserRepository()
        reconciler = IdentityReconciler(repo, clock=FixedClock(now))

        # Act
        user = await reconciler.reconcile(make_assertion())

        # Assert
        assert user.created_at == now
        assert user.last_login_at == now
        assert user.display_name == "Rabscuttle"
        assert user.avatar.large == "https://avatars.steamstatic.com/abc_full.jpg"
        assert repo.count() == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_logins_yield_one_record(self):
        """Two simultaneous first logins for ext-42 should end with one record."""
        # Arrange
        repo = InterleavingUserRepository()
        reconciler = IdentityReconciler(repo)
        assertion = make_assertion(external_id="ext-42")

        # Act
        first, second = await asyncio.gather(
            reconciler.reconcile(assertion),
            reconciler.reconcile(assertion),
        )

        # Assert
        assert repo.insert_attempts == 2  # Both raced to insert
        assert repo.count() == 1
        assert first.id == second.id
        stored = await repo.find_by_external_id(ExternalId("ext-42"))
        assert stored.id == first.id

    @pytest.mark.asyncio
    async def test_many_concurrent_logins_share_one_local_id(self):
        repo = InterleavingUserRepository()
        reconciler = IdentityReconciler(repo)

        results = await asyncio.gather(
            *(reconciler.reconcile(make_assertion(external_id="ext-42")) for _ in range(5))
        )

        assert repo.count() == 1
        assert len({user.id for user in results}) == 1

    @pytest.mark.asyncio
    async def test_store_failure_surfaces_and_creates_nothing(self):
        """A failing store should raise StoreUnavailable and leave zero rows."""
        repo = UnavailableUserRepository()
        reconciler = IdentityReconciler(repo)

        with pytest.raises(StoreUnavailable):
            await reconciler.reconcile(make_assertion())

        assert repo.count() == 0

    @pytest.mark.asyncio
    async def test_duplicate_without_winner_is_store_unavailable(self):
        """A race signal with no readable winner is an inconsistent store."""
        reconciler = IdentityReconciler(PhantomDuplicateRepository())

        with pytest.raises(StoreUnavailable, match="vanished"):
            await reconciler.reconcile(make_assertion())


class TestReconcileReturningUser:
    """Tests for reconcile() when a record already exists."""

    @pytest.mark.asyncio
    async def test_refreshes_profile_and_keeps_identity(self):
        """Second login should keep id/created_at and refresh display fields."""
        # Arrange
        t0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        clock = FixedClock(t0)
        repo = InMemoryUserRepository()
        reconciler = IdentityReconciler(repo, clock=clock)
        original = await reconciler.reconcile(make_assertion(display_name="Old"))

        # Act
        clock.now = t0 + timedelta(hours=1)
        updated = await reconciler.reconcile(
            make_assertion(display_name="New", avatar="https://avatars.steamstatic.com/new")
        )

        # Assert
        assert updated.id == original.id
        assert updated.created_at == t0
        assert updated.last_login_at == t0 + timedelta(hours=1)
        assert updated.display_name == "New"
        assert updated.avatar.small == "https://avatars.steamstatic.com/new.jpg"
        assert repo.count() == 1

    @pytest.mark.asyncio
    async def test_last_login_strictly_advances_when_clock_stalls(self):
        """Logins within the same clock tick must still advance last_login_at."""
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        reconciler = IdentityReconciler(InMemoryUserRepository(), clock=FixedClock(now))

        first = await reconciler.reconcile(make_assertion())
        second = await reconciler.reconcile(make_assertion())

        assert second.created_at == first.created_at
        assert second.last_login_at > first.last_login_at

    @pytest.mark.asyncio
    async def test_last_login_advances_when_clock_goes_backwards(self):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        clock = FixedClock(now)
        reconciler = IdentityReconciler(InMemoryUserRepository(), clock=clock)
        first = await reconciler.reconcile(make_assertion())

        clock.now = now - timedelta(minutes=5)
        second = await reconciler.reconcile(make_assertion())

        assert second.last_login_at > first.last_login_at
        assert second.created_at <= second.last_login_at

    @pytest.mark.asyncio
    async def test_update_failure_surfaces(self):
        """Update errors other than the race must reach the caller."""
        reconciler = IdentityReconciler(UnavailableUserRepository(make_user()))

        with pytest.raises(StoreUnavailable):
            await reconciler.reconcile(make_assertion())

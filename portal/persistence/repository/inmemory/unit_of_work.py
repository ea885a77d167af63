"""In-memory unit of work for testing."""

from portal.domain.repository import UnitOfWork

from .session import InMemorySessionRepository
from .user import InMemoryUserRepository


class InMemoryUnitOfWork(UnitOfWork):
    """Snapshot-based transaction over the in-memory repositories.

    State is captured on creation and after every commit. Rolling back
    restores the last captured state of both whole repositories.

    The repositories are shared across requests, so this only isolates
    one request at a time: a rollback also reverts whatever another unit
    of work committed after this one last captured. Test clients drive
    requests sequentially, which keeps that window closed.
    """

    def __init__(
        self,
        user_repository: InMemoryUserRepository,
        session_repository: InMemorySessionRepository,
    ) -> None:
        self.user_repository = user_repository
        self.session_repository = session_repository
        self._capture()

    async def commit(self) -> None:
        self._capture()

    async def rollback(self) -> None:
        self.user_repository.restore(self._users)
        self.session_repository.restore(self._sessions)

    def _capture(self) -> None:
        self._users = self.user_repository.snapshot()
        self._sessions = self.session_repository.snapshot()

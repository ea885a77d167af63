"""Unit of work interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Transaction boundary shared by the repositories of one request.

    Writes made through the repositories only become durable on
    ``commit``. ``rollback`` discards everything since the last commit.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make all pending writes durable.

        Raises:
            StoreUnavailable: If the store rejects or cannot receive the commit
        """
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all pending writes."""
        pass

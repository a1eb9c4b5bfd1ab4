from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Commit/rollback boundary around one store transaction"""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def savepoint(self):
        """Async context manager; an exception leaving it undoes only the writes made inside"""
        pass

from abc import ABC, abstractmethod


class BaseDatabaseDriver(ABC):
    """Lifecycle contract shared by storage drivers."""

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass

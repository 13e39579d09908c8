"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type, Any
from sqlmodel import SQLModel, select, func
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T", bound=SQLModel)


class IRepository(ABC, Generic[T]):
    """Repository interface; standard CRUD keyed by an integer id."""

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID, or None."""
        pass

    @abstractmethod
    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Get all entities (paginated)."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Update entity."""
        pass

    @abstractmethod
    async def delete(self, id: int) -> bool:
        """Delete entity; False when nothing matched."""
        pass


class BaseRepository(IRepository[T]):
    """Generic SQLModel CRUD; subclasses add derived lookups on top of find_one/find_all."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    def _filtered(self, statement, filters: dict[str, Any]):
        # Unknown attribute names are ignored
        for key, value in filters.items():
            if hasattr(self.model, key):
                statement = statement.where(getattr(self.model, key) == value)
        return statement

    async def get_by_id(self, id: int) -> Optional[T]:
        statement = select(self.model).where(self.model.id == id)
        result = await self.session.exec(statement)
        return result.first()

    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        statement = select(self.model).order_by(self.model.id).limit(limit).offset(offset)
        result = await self.session.exec(statement)
        return list(result.all())

    async def create(self, entity: T) -> T:
        """Add entity to the session; the id is assigned on flush."""
        self.session.add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Merge entity into the session; returns the session-bound instance (may differ for detached input)."""
        return await self.session.merge(entity)

    async def delete(self, id: int) -> bool:
        entity = await self.get_by_id(id)
        if entity is None:
            return False
        await self.session.delete(entity)
        return True

    async def exists(self, id: int) -> bool:
        return await self.count(id=id) > 0

    async def find_one(self, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. username='admin')."""
        statement = self._filtered(select(self.model), filters)
        result = await self.session.exec(statement)
        return result.first()

    async def find_all(self, **filters) -> List[T]:
        """Find entities by filters."""
        statement = self._filtered(select(self.model).order_by(self.model.id), filters)
        result = await self.session.exec(statement)
        return list(result.all())

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        statement = self._filtered(select(func.count(self.model.id)), filters)
        result = await self.session.exec(statement)
        return result.one()

"""
CRUD service interface and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Type, TypeVar
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel
from framework.exceptions.handler import BusinessException, NotFoundException
from framework.logging.logger import get_logger
from framework.repository.base import BaseRepository
from framework.repository.unit_of_work import UnitOfWork

T = TypeVar("T", bound=SQLModel)

logger = get_logger("crud_service")


class ICRUDService(ABC, Generic[T]):
    """Service interface; standard CRUD keyed by an integer id."""

    @abstractmethod
    async def list_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        pass

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        pass

    @abstractmethod
    async def save_or_update(self, entity: T) -> T:
        """Insert when entity.id is None, otherwise merge by id; commits and returns the stored instance."""
        pass

    @abstractmethod
    async def delete(self, id: int) -> bool:
        pass


class BaseCRUDService(ICRUDService[T]):
    """Generic CRUD service; subclasses set repository_class and entity_name."""

    repository_class: Type[BaseRepository] = BaseRepository
    entity_name: str = "Entity"

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def repository(self) -> BaseRepository[T]:
        return self.uow.get_repository(self.repository_class)

    async def list_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        return await self.repository.get_all(limit=limit, offset=offset)

    async def get_by_id(self, id: int) -> Optional[T]:
        return await self.repository.get_by_id(id)

    async def get_or_raise(self, id: int) -> T:
        """Like get_by_id, but a missing row raises NotFoundException."""
        entity = await self.get_by_id(id)
        if entity is None:
            raise NotFoundException(self.entity_name, id)
        return entity

    async def save_or_update(self, entity: T) -> T:
        creating = entity.id is None
        try:
            if creating:
                entity = await self.repository.create(entity)
            else:
                entity = await self.repository.update(entity)
            await self.uow.commit()
        except IntegrityError as e:
            await self.uow.rollback()
            error_msg = str(e.orig) if hasattr(e, "orig") else str(e)
            logger.warning(f"{self.entity_name} integrity error: {error_msg}")
            raise BusinessException(
                f"{self.entity_name} conflicts with existing data",
                code=409
            )

        logger.info(f"{self.entity_name} {'created' if creating else 'updated'}: id={entity.id}")
        return entity

    async def delete(self, id: int) -> bool:
        deleted = await self.repository.delete(id)
        if deleted:
            await self.uow.commit()
            logger.info(f"{self.entity_name} deleted: id={id}")
        return deleted

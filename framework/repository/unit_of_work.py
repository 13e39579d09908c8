"""
Unit of Work: shares one session across repositories and owns the transaction boundary.
"""

from typing import Dict, Type, TypeVar
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseRepository

R = TypeVar("R", bound=BaseRepository)


class UnitOfWork:
    """Manages related repositories with a shared session and transaction commit/rollback."""

    def __init__(self, session: AsyncSession):
        if session is None:
            raise ValueError("Session must be provided. Use UnitOfWork.from_session() or pass session explicitly.")

        self.session = session
        self._repositories: Dict[type, BaseRepository] = {}

    @classmethod
    async def from_session(cls, session: AsyncSession) -> "UnitOfWork":
        """Create UnitOfWork from an existing session."""
        return cls(session=session)

    def get_repository(self, repo_class: Type[R]) -> R:
        """Get or create a repository instance (one per class, cached)."""
        if repo_class not in self._repositories:
            self._repositories[repo_class] = repo_class(self.session)
        return self._repositories[repo_class]

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def flush(self) -> None:
        """Flush session (e.g. to get auto-increment IDs)."""
        await self.session.flush()

    async def refresh(self, entity) -> None:
        await self.session.refresh(entity)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()

"""Identity module repository implementations."""

from typing import List, Optional
from sqlmodel import delete, select
from framework.repository.base import BaseRepository
from .models import Role, User, UserRoleLink


class RoleRepository(BaseRepository[Role]):
    """Role repository."""

    def __init__(self, session):
        super().__init__(session, Role)

    async def get_by_role(self, role: str) -> Optional[Role]:
        """Find role by its name."""
        return await self.find_one(role=role)

    async def get_by_roles(self, roles: List[str]) -> List[Role]:
        """Find all roles whose names are in the given list."""
        if not roles:
            return []
        statement = select(Role).where(Role.role.in_(roles)).order_by(Role.id)
        result = await self.session.exec(statement)
        return list(result.all())

    async def delete(self, id: int) -> bool:
        """Delete role and detach it from every user holding it."""
        role = await self.get_by_id(id)
        if role is None:
            return False
        await self.session.execute(delete(UserRoleLink).where(UserRoleLink.role_id == id))
        await self.session.delete(role)
        return True


class UserRepository(BaseRepository[User]):
    """User repository."""

    def __init__(self, session):
        super().__init__(session, User)

    async def find_by_username(self, username: str) -> Optional[User]:
        """Find user by username; None when no such user exists."""
        return await self.find_one(username=username)

    async def list_by_role(self, role: str, limit: int = 100, offset: int = 0) -> List[User]:
        """Users holding the given role."""
        statement = (
            select(User)
            .join(UserRoleLink, UserRoleLink.user_id == User.id)
            .join(Role, Role.id == UserRoleLink.role_id)
            .where(Role.role == role)
            .order_by(User.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.exec(statement)
        return list(result.all())

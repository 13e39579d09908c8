from abc import abstractmethod
from typing import List, Optional
from framework.config import settings
from framework.exceptions.handler import BusinessException, NotFoundException
from framework.logging.logger import get_logger
from framework.security import get_password_hash, verify_password
from framework.service.base import BaseCRUDService, ICRUDService
from .models import Role, User
from .repository import RoleRepository, UserRepository

logger = get_logger("identity_service")


def normalize_role(name: str) -> str:
    return name.strip().upper()


class IUserService(ICRUDService[User]):
    """User service interface: CRUD plus lookup by username."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        """Return the user with this username, or None."""
        pass


class UserService(BaseCRUDService[User], IUserService):
    repository_class = UserRepository
    entity_name = "User"

    @property
    def role_repository(self) -> RoleRepository:
        return self.uow.get_repository(RoleRepository)

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self.repository.find_by_username(username)

    async def list_by_role(self, role: str, limit: int = 100, offset: int = 0) -> List[User]:
        return await self.repository.list_by_role(normalize_role(role), limit=limit, offset=offset)

    async def get_by_username_or_raise(self, username: str) -> User:
        user = await self.find_by_username(username)
        if user is None:
            raise NotFoundException(self.entity_name, username)
        return user

    async def _resolve_roles(self, names: List[str]) -> List[Role]:
        wanted = sorted({normalize_role(name) for name in names})
        found = await self.role_repository.get_by_roles(wanted)
        missing = set(wanted) - {role.role for role in found}
        if missing:
            raise BusinessException(f"Unknown roles: {', '.join(sorted(missing))}", code=400)
        return found

    async def create_user(
        self,
        username: str,
        password: str,
        roles: Optional[List[str]] = None,
        enabled: bool = True,
    ) -> User:
        """
        Create a user with a bcrypt-hashed password.

        With roles=None the configured default role is assigned when it exists;
        an explicit list must name existing roles only.
        """
        if await self.find_by_username(username) is not None:
            logger.warning(f"Username {username} already exists")
            raise BusinessException("Username already exists", code=4001)

        if roles is None:
            default_role = await self.role_repository.get_by_role(settings.DEFAULT_USER_ROLE)
            user_roles = [default_role] if default_role else []
        else:
            user_roles = await self._resolve_roles(roles)

        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            enabled=enabled,
        )
        user.roles = user_roles
        await self.save_or_update(user)
        logger.info(f"User {username} created with roles {user.role_names}")
        return user

    async def update_user(
        self,
        user_id: int,
        enabled: Optional[bool] = None,
        roles: Optional[List[str]] = None,
    ) -> User:
        """Apply the given changes; None leaves a field untouched."""
        user = await self.get_or_raise(user_id)
        if enabled is not None:
            user.enabled = enabled
            if enabled:
                user.failed_login_attempts = 0
        if roles is not None:
            user.roles = await self._resolve_roles(roles)
        return await self.save_or_update(user)

    async def change_password(self, user_id: int, new_password: str) -> User:
        user = await self.get_or_raise(user_id)
        user.hashed_password = get_password_hash(new_password)
        user.failed_login_attempts = 0
        return await self.save_or_update(user)

    async def assign_role(self, user_id: int, role_name: str) -> User:
        user = await self.get_or_raise(user_id)
        role = await self.role_repository.get_by_role(normalize_role(role_name))
        if role is None:
            raise NotFoundException("Role", role_name)
        if role.id not in {r.id for r in user.roles}:
            user.roles.append(role)
            await self.save_or_update(user)
        return user

    async def remove_role(self, user_id: int, role_name: str) -> User:
        user = await self.get_or_raise(user_id)
        name = normalize_role(role_name)
        kept = [role for role in user.roles if role.role != name]
        if len(kept) != len(user.roles):
            user.roles = kept
            await self.save_or_update(user)
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """
        Verify credentials.

        A wrong password increments the user's failure counter and disables the
        account once MAX_FAILED_LOGIN_ATTEMPTS is reached; success resets it.
        """
        user = await self.find_by_username(username)
        if user is None:
            raise BusinessException("Invalid username or password", code=401)
        if not user.enabled:
            raise BusinessException("Account is disabled", code=403)

        if not verify_password(password, user.hashed_password):
            user.failed_login_attempts += 1
            if user.failed_login_attempts >= settings.MAX_FAILED_LOGIN_ATTEMPTS:
                user.enabled = False
                logger.warning(
                    f"User {username} disabled after {user.failed_login_attempts} failed logins"
                )
            await self.save_or_update(user)
            raise BusinessException("Invalid username or password", code=401)

        if user.failed_login_attempts:
            user.failed_login_attempts = 0
            await self.save_or_update(user)

        logger.info(f"User {username} authenticated successfully")
        return user


class RoleService(BaseCRUDService[Role]):
    repository_class = RoleRepository
    entity_name = "Role"

    async def get_by_role(self, name: str) -> Optional[Role]:
        return await self.repository.get_by_role(normalize_role(name))

    async def create_role(self, name: str) -> Role:
        name = normalize_role(name)
        if not name:
            raise BusinessException("Role name cannot be empty", code=400)
        if await self.repository.get_by_role(name) is not None:
            raise BusinessException(f"Role already exists: {name}", code=409)
        return await self.save_or_update(Role(role=name))

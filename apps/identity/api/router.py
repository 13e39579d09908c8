from datetime import timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from framework.config import settings
from framework.dependencies import get_uow
from framework.exceptions.handler import BusinessException, NotFoundException
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, create_access_token, get_current_user, require_roles
from ..models import Role, User
from ..service import RoleService, UserService

ADMIN = "ADMIN"

router = APIRouter()
users_router = APIRouter()
roles_router = APIRouter()


class LoginSchema(BaseModel):
    username: str
    password: str

class UserCreateSchema(BaseModel):
    username: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    roles: Optional[List[str]] = None
    enabled: bool = True

class UserUpdateSchema(BaseModel):
    enabled: Optional[bool] = None
    roles: Optional[List[str]] = None

class PasswordChangeSchema(BaseModel):
    password: str = Field(min_length=6, max_length=72)

class RoleCreateSchema(BaseModel):
    role: str = Field(min_length=1, max_length=50)


def get_user_service(uow: UnitOfWork = Depends(get_uow)) -> UserService:
    """Dependency: create UserService."""
    return UserService(uow)

def get_role_service(uow: UnitOfWork = Depends(get_uow)) -> RoleService:
    """Dependency: create RoleService."""
    return RoleService(uow)


def user_to_dict(user: User) -> dict:
    # hashed_password never leaves the service
    return {
        "id": user.id,
        "username": user.username,
        "enabled": user.enabled,
        "roles": user.role_names,
    }

def role_to_dict(role: Role) -> dict:
    return {"id": role.id, "role": role.role}


# --- Auth ---

@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    """Login: return JWT and set cookie."""
    user = await service.authenticate(data.username, data.password)
    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={
            "sub": user.username,
            "user_id": user.id,
            "roles": user.role_names
        },
        expires_delta=expires_delta
    )

    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=int(expires_delta.total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )

    return ResponseModel.success(
        data={
            "access_token": access_token,
            "token_type": "bearer",
            "user": user_to_dict(user)
        }
    )

@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(data={"message": "Logged out successfully"})

@router.get("/me")
async def me(current_user: CurrentUser = Depends(get_current_user)):
    return ResponseModel.success(data=current_user.model_dump())


# --- Users ---

@users_router.get("")
async def list_users(
    limit: int = 100,
    offset: int = 0,
    role: Optional[str] = None,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(get_current_user)
):
    """List users, optionally only those holding a role."""
    if role:
        users = await service.list_by_role(role, limit=limit, offset=offset)
    else:
        users = await service.list_all(limit=limit, offset=offset)
    return ResponseModel.success(data=[user_to_dict(user) for user in users])

@users_router.get("/by-username/{username}")
async def get_user_by_username(
    username: str,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(get_current_user)
):
    user = await service.get_by_username_or_raise(username)
    return ResponseModel.success(data=user_to_dict(user))

@users_router.get("/{user_id}")
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(get_current_user)
):
    user = await service.get_or_raise(user_id)
    return ResponseModel.success(data=user_to_dict(user))

@users_router.post("")
async def create_user(
    data: UserCreateSchema,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    user = await service.create_user(
        username=data.username,
        password=data.password,
        roles=data.roles,
        enabled=data.enabled
    )
    return ResponseModel.success(data=user_to_dict(user))

@users_router.put("/{user_id}")
async def update_user(
    user_id: int,
    data: UserUpdateSchema,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    user = await service.update_user(user_id, enabled=data.enabled, roles=data.roles)
    return ResponseModel.success(data=user_to_dict(user))

@users_router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    data: PasswordChangeSchema,
    service: UserService = Depends(get_user_service),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Users may change their own password; admins may change anyone's."""
    if current_user.id != user_id and not current_user.has_role(ADMIN):
        raise BusinessException("Cannot change another user's password", status_code=403, code=403)
    await service.change_password(user_id, data.password)
    return ResponseModel.success(data={"message": "Password changed"})

@users_router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    if not await service.delete(user_id):
        raise NotFoundException("User", user_id)
    return ResponseModel.success(data={"id": user_id})

@users_router.post("/{user_id}/roles/{role}")
async def assign_role(
    user_id: int,
    role: str,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    user = await service.assign_role(user_id, role)
    return ResponseModel.success(data=user_to_dict(user))

@users_router.delete("/{user_id}/roles/{role}")
async def remove_role(
    user_id: int,
    role: str,
    service: UserService = Depends(get_user_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    user = await service.remove_role(user_id, role)
    return ResponseModel.success(data=user_to_dict(user))


# --- Roles ---

@roles_router.get("")
async def list_roles(
    limit: int = 100,
    offset: int = 0,
    service: RoleService = Depends(get_role_service),
    _: CurrentUser = Depends(get_current_user)
):
    roles = await service.list_all(limit=limit, offset=offset)
    return ResponseModel.success(data=[role_to_dict(role) for role in roles])

@roles_router.get("/{role_id}")
async def get_role(
    role_id: int,
    service: RoleService = Depends(get_role_service),
    _: CurrentUser = Depends(get_current_user)
):
    role = await service.get_or_raise(role_id)
    return ResponseModel.success(data=role_to_dict(role))

@roles_router.post("")
async def create_role(
    data: RoleCreateSchema,
    service: RoleService = Depends(get_role_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    role = await service.create_role(data.role)
    return ResponseModel.success(data=role_to_dict(role))

@roles_router.delete("/{role_id}")
async def delete_role(
    role_id: int,
    service: RoleService = Depends(get_role_service),
    _: CurrentUser = Depends(require_roles(ADMIN))
):
    if not await service.delete(role_id):
        raise NotFoundException("Role", role_id)
    return ResponseModel.success(data={"id": role_id})

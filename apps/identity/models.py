from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship


class UserRoleLink(SQLModel, table=True):
    __tablename__ = "user_roles"
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", primary_key=True)
    role_id: Optional[int] = Field(default=None, foreign_key="roles.id", primary_key=True)


class Role(SQLModel, table=True):
    __tablename__ = "roles"
    id: Optional[int] = Field(default=None, primary_key=True)
    role: str = Field(unique=True, index=True, max_length=50)  # e.g. ADMIN, CUSTOMER


class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=255)
    hashed_password: str
    enabled: bool = Field(default=True)
    failed_login_attempts: int = Field(default=0)
    # Loaded eagerly: async sessions cannot lazy-load on attribute access
    roles: List[Role] = Relationship(
        link_model=UserRoleLink,
        sa_relationship_kwargs={"lazy": "selectin"},
    )

    @property
    def role_names(self) -> List[str]:
        return sorted(role.role for role in self.roles)

"""Test config and shared fixtures."""
import pytest
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncGenerator, Optional
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.dependencies import get_db
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser, get_current_user
from apps.catalog.models import Product
from apps.identity.models import Role, User
from apps.identity.service import UserService
import apps.models  # noqa: F401  registers every table in SQLModel.metadata


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_USER = CurrentUser(id=1, username="admin", roles=["ADMIN"])
CUSTOMER_USER = CurrentUser(id=2, username="customer", roles=["CUSTOMER"])


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def uow(async_session: AsyncSession) -> UnitOfWork:
    return UnitOfWork(session=async_session)


@asynccontextmanager
async def _client_for(session: AsyncSession, user: Optional[CurrentUser]):
    async def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as an ADMIN."""
    async with _client_for(async_session, ADMIN_USER) as ac:
        yield ac


@pytest.fixture
async def customer_client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as a CUSTOMER."""
    async with _client_for(async_session, CUSTOMER_USER) as ac:
        yield ac


@pytest.fixture
async def anon_client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client with real token handling (no current-user override)."""
    async with _client_for(async_session, None) as ac:
        yield ac


@pytest.fixture
async def sample_roles(async_session: AsyncSession) -> dict:
    """ADMIN and CUSTOMER roles, keyed by name."""
    roles = {name: Role(role=name) for name in ("ADMIN", "CUSTOMER")}
    async_session.add_all(roles.values())
    await async_session.commit()
    return roles


@pytest.fixture
async def sample_user(uow: UnitOfWork, sample_roles: dict) -> User:
    """Customer 'alice' with password 'secret123'."""
    return await UserService(uow).create_user("alice", "secret123", roles=["CUSTOMER"])


@pytest.fixture
async def sample_products(async_session: AsyncSession) -> list:
    products = [
        Product(description="Laptop", price=Decimal("999.99"), image_url="https://img.example/laptop.png"),
        Product(description="Mouse", price=Decimal("19.50")),
        Product(description="Keyboard", price=Decimal("49.00")),
    ]
    async_session.add_all(products)
    await async_session.commit()
    return products

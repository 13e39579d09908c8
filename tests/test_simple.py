"""
Simple test cases to verify test configuration.
"""
from httpx import AsyncClient
from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession


async def test_app_exists(client: AsyncClient):
    """Test that app exists."""
    assert client is not None


async def test_database_session(async_session: AsyncSession):
    """Test that database session works."""
    result = await async_session.execute(text("SELECT 1"))
    assert result.scalar() == 1


async def test_openapi_lists_all_routers(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/api/v1/auth/login" in paths
    assert "/api/v1/users/by-username/{username}" in paths
    assert "/api/v1/roles" in paths
    assert "/api/v1/products/{product_id}" in paths


async def test_trace_id_header_echoed(client: AsyncClient):
    response = await client.get("/api/v1/products", headers={"X-Trace-ID": "trace-123"})
    assert response.headers["X-Trace-ID"] == "trace-123"


async def test_database_manager_lifecycle():
    from framework.database.manager import DatabaseManager
    from framework.dependencies import get_db

    class _Settings:
        DATABASE_URL = "sqlite+aiosqlite:///:memory:"
        DB_ECHO = False

    await DatabaseManager.shutdown()
    manager = DatabaseManager.get_instance(_Settings())
    try:
        assert DatabaseManager.get_instance() is manager
        await manager.sql.connect()
        async for session in get_db():
            result = await session.execute(text("SELECT 2"))
            assert result.scalar() == 2
    finally:
        await DatabaseManager.shutdown()
    assert DatabaseManager._instance is None

"""Unit tests for the FastAPI application wiring."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_database_settings, get_settings
from tenancy.dependencies.directory import get_tenant_directory


@pytest.fixture
def sqlite_env(monkeypatch, tmp_path):
    """Point the application at a fresh SQLite file with schema creation on."""
    db_path = tmp_path / "app.db"
    monkeypatch.setenv("MULTITENANT_DB_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("MULTITENANT_DB_CREATE_SCHEMA", "true")
    get_settings.cache_clear()
    get_database_settings.cache_clear()
    yield db_path
    get_settings.cache_clear()
    get_database_settings.cache_clear()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_needs_no_tenant(self):
        from main import app

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://testserver"
        ) as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestLifespan:
    """Startup and shutdown of the application."""

    @pytest.mark.asyncio
    async def test_startup_creates_schema_and_shutdown_disposes_engine(
        self, sqlite_env
    ):
        import infrastructure.database.dependencies as db_dependencies
        from main import app

        async with LifespanManager(app):
            assert db_dependencies._engine is not None

        assert db_dependencies._engine is None

        engine = create_async_engine(f"sqlite+aiosqlite:///{sqlite_env}")
        async with engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
        await engine.dispose()

        assert {"tenants", "products"} <= set(tables)

    @pytest.mark.asyncio
    async def test_shutdown_drops_tenant_directory(self, sqlite_env):
        import tenancy.dependencies.directory as directory_module
        from main import app

        async with LifespanManager(app):
            get_tenant_directory()
            assert directory_module._directory is not None

        assert directory_module._directory is None


class TestStorageErrors:
    """Storage failures surface as 500 without driver details."""

    @pytest.mark.asyncio
    async def test_directory_failure_is_storage_error(self, tenancy_env):
        from main import app

        failing = AsyncMock()
        failing.validate = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )
        app.dependency_overrides[get_tenant_directory] = lambda: failing
        app.dependency_overrides[get_session] = lambda: AsyncMock()
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://testserver"
            ) as client:
                response = await client.get("/products", headers={"tenant": "t1"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Storage operation failed",
            "code": "STORAGE_ERROR",
        }
        assert "connection refused" not in response.text

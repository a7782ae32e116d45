"""Unit test fixtures.

Persistence tests run against a throwaway SQLite database (aiosqlite) in the
test's temporary directory, with the tenants ``t1`` and ``t2`` active and
``t3`` deactivated.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import catalog.infrastructure.models  # noqa: F401
from infrastructure.database.dependencies import get_session
from infrastructure.database.models import Base
from infrastructure.settings import get_tenancy_settings
from tenancy.dependencies.directory import get_tenant_directory
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.tenant_directory import (
    CachedTenantDirectory,
    RepositoryTenantDirectory,
)

ADMIN_TOKEN = "test-admin-token"


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine bound to a fresh SQLite database with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tenancy.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a sessionmaker configured like the application's."""
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def seeded_tenants(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Insert tenants t1 and t2 (active) and t3 (inactive)."""
    async with session_factory() as session:
        session.add_all(
            [
                TenantModel(id="t1", name="Tenant One"),
                TenantModel(id="t2", name="Tenant Two"),
                TenantModel(id="t3", name="Tenant Three", active=False),
            ]
        )
        await session.commit()


@pytest.fixture
def tenancy_env(monkeypatch: pytest.MonkeyPatch):
    """Configure tenancy settings through the environment for one test.

    Tests may set further MULTITENANT_TENANCY_* variables and call
    ``get_tenancy_settings.cache_clear()`` again.
    """
    monkeypatch.setenv("MULTITENANT_TENANCY_ADMIN_TOKEN", ADMIN_TOKEN)
    get_tenancy_settings.cache_clear()
    yield monkeypatch
    get_tenancy_settings.cache_clear()


@pytest.fixture
def directory(session_factory: async_sessionmaker[AsyncSession]) -> CachedTenantDirectory:
    """Provide a cached directory over the test database."""
    return CachedTenantDirectory(RepositoryTenantDirectory(session_factory))


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    seeded_tenants: None,
    tenancy_env: pytest.MonkeyPatch,
    directory: CachedTenantDirectory,
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client for the application wired to the test database."""
    from main import app

    async def _get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_tenant_directory] = lambda: directory

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Headers granting administrative access."""
    return {"X-Admin-Token": ADMIN_TOKEN}

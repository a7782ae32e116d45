"""Unit tests for TenantRepository against SQLite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.infrastructure.observability import TenantRepositoryProbe
from tenancy.infrastructure.tenant_repository import TenantRepository
from tenancy.ports.exceptions import DuplicateTenantNameError
from tenancy.ports.repositories import ITenantRepository


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=TenantRepositoryProbe)


class TestTenantRepository:
    """Tests for tenant persistence."""

    @pytest.mark.asyncio
    async def test_save_and_get_by_id(self, session_factory, mock_probe):
        tenant = Tenant.create(name="Acme", tenant_id=TenantId(value="acme"))

        async with session_factory() as session:
            await TenantRepository(session, probe=mock_probe).save(tenant)
            await session.commit()

        async with session_factory() as session:
            loaded = await TenantRepository(session).get_by_id(TenantId(value="acme"))

        assert loaded == tenant
        mock_probe.tenant_saved.assert_called_once_with("acme", True)

    @pytest.mark.asyncio
    async def test_save_updates_active_flag(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            repository = TenantRepository(session)
            tenant = await repository.get_by_id(TenantId(value="t1"))
            assert tenant is not None
            tenant.deactivate()
            await repository.save(tenant)
            await session.commit()

        async with session_factory() as session:
            loaded = await TenantRepository(session).get_by_id(TenantId(value="t1"))

        assert loaded is not None
        assert loaded.active is False

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(
        self, session_factory, seeded_tenants, mock_probe
    ):
        async with session_factory() as session:
            with pytest.raises(DuplicateTenantNameError):
                await TenantRepository(session, probe=mock_probe).save(
                    Tenant.create(name="Tenant One")
                )

        mock_probe.duplicate_tenant_name.assert_called_once_with("Tenant One")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            repository = TenantRepository(session)

            assert await repository.get_by_id(TenantId(value="nope")) is None
            assert await repository.get_by_name("Nope") is None

    @pytest.mark.asyncio
    async def test_get_by_name(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            tenant = await TenantRepository(session).get_by_name("Tenant Three")

        assert tenant is not None
        assert tenant.id.value == "t3"
        assert tenant.active is False

    @pytest.mark.asyncio
    async def test_list_all_ordered_by_id(self, session_factory, seeded_tenants, mock_probe):
        async with session_factory() as session:
            tenants = await TenantRepository(session, probe=mock_probe).list_all()

        assert [t.id.value for t in tenants] == ["t1", "t2", "t3"]
        mock_probe.tenants_listed.assert_called_once_with(3)

    def test_implements_port(self):
        assert isinstance(TenantRepository(MagicMock()), ITenantRepository)

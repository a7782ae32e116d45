"""Unit tests for TenantService with mocked collaborators."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from tenancy.application.observability import TenantServiceProbe
from tenancy.application.services import TenantService
from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    DuplicateTenantIdError,
    DuplicateTenantNameError,
    TenantNotFoundError,
)


@pytest.fixture
def mock_session() -> MagicMock:
    """Session whose begin() works as an async context manager."""
    session = MagicMock()
    transaction = AsyncMock()
    transaction.__aenter__ = AsyncMock(return_value=None)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture
def mock_repository() -> AsyncMock:
    repository = AsyncMock()
    repository.get_by_id = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def mock_directory() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=TenantServiceProbe)


@pytest.fixture
def service(mock_repository, mock_directory, mock_session, mock_probe) -> TenantService:
    return TenantService(
        tenant_repository=mock_repository,
        directory=mock_directory,
        session=mock_session,
        probe=mock_probe,
    )


class TestCreateTenant:
    """Tests for TenantService.create_tenant()."""

    @pytest.mark.asyncio
    async def test_creates_with_chosen_id(self, service, mock_repository, mock_directory):
        tenant = await service.create_tenant(name="Acme", tenant_id="acme")

        assert tenant.id.value == "acme"
        assert tenant.active is True
        mock_repository.save.assert_awaited_once_with(tenant)
        mock_directory.invalidate.assert_awaited_once_with("acme")

    @pytest.mark.asyncio
    async def test_creates_with_generated_id(self, service, mock_repository):
        tenant = await service.create_tenant(name="Acme")

        assert len(tenant.id.value) == 26
        mock_repository.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_id_raises(self, service, mock_repository, mock_directory):
        mock_repository.get_by_id.return_value = Tenant.create(
            name="Other", tenant_id=TenantId(value="acme")
        )

        with pytest.raises(DuplicateTenantIdError):
            await service.create_tenant(name="Acme", tenant_id="acme")

        mock_repository.save.assert_not_awaited()
        mock_directory.invalidate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_name_propagates(self, service, mock_repository, mock_probe):
        mock_repository.save.side_effect = DuplicateTenantNameError("taken")

        with pytest.raises(DuplicateTenantNameError):
            await service.create_tenant(name="Acme")

        mock_probe.duplicate_tenant.assert_called_once_with(name="Acme", conflict="name")

    @pytest.mark.asyncio
    async def test_existing_id_reports_id_conflict(self, service, mock_repository, mock_probe):
        mock_repository.get_by_id.return_value = Tenant.create(
            name="Other", tenant_id=TenantId(value="acme")
        )

        with pytest.raises(DuplicateTenantIdError):
            await service.create_tenant(name="Acme", tenant_id="acme")

        mock_probe.duplicate_tenant.assert_called_once_with(name="Acme", conflict="id")
        mock_probe.tenant_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_created_records_id_source_and_invalidation(self, service, mock_probe):
        await service.create_tenant(name="Acme", tenant_id="acme")

        mock_probe.tenant_created.assert_called_once_with(
            tenant_id="acme", name="Acme", id_chosen=True
        )
        mock_probe.directory_entry_invalidated.assert_called_once_with(
            tenant_id="acme", trigger="created"
        )

    @pytest.mark.asyncio
    async def test_malformed_id_raises_value_error(self, service):
        with pytest.raises(ValueError):
            await service.create_tenant(name="Acme", tenant_id="not valid!")


class TestActivation:
    """Tests for deactivate/activate."""

    @pytest.mark.asyncio
    async def test_deactivate_saves_and_invalidates_cache(
        self, service, mock_repository, mock_directory
    ):
        tenant = Tenant.create(name="Acme", tenant_id=TenantId(value="acme"))
        mock_repository.get_by_id.return_value = tenant

        result = await service.deactivate_tenant(TenantId(value="acme"))

        assert result.active is False
        mock_repository.save.assert_awaited_once_with(tenant)
        mock_directory.invalidate.assert_awaited_once_with("acme")

    @pytest.mark.asyncio
    async def test_activate(self, service, mock_repository, mock_directory):
        tenant = Tenant(id=TenantId(value="acme"), name="Acme", active=False)
        mock_repository.get_by_id.return_value = tenant

        result = await service.activate_tenant(TenantId(value="acme"))

        assert result.active is True
        mock_directory.invalidate.assert_awaited_once_with("acme")

    @pytest.mark.asyncio
    async def test_unknown_tenant_raises_not_found(self, service, mock_directory, mock_probe):
        with pytest.raises(TenantNotFoundError):
            await service.deactivate_tenant(TenantId(value="nope"))

        mock_directory.invalidate.assert_not_awaited()
        mock_probe.directory_entry_invalidated.assert_not_called()

    @pytest.mark.asyncio
    async def test_deactivate_records_change_then_invalidation(
        self, service, mock_repository, mock_probe
    ):
        mock_repository.get_by_id.return_value = Tenant.create(
            name="Acme", tenant_id=TenantId(value="acme")
        )

        await service.deactivate_tenant(TenantId(value="acme"))

        mock_probe.tenant_activation_changed.assert_called_once_with(
            tenant_id="acme", active=False
        )
        mock_probe.directory_entry_invalidated.assert_called_once_with(
            tenant_id="acme", trigger="deactivated"
        )

    @pytest.mark.asyncio
    async def test_deactivating_inactive_tenant_skips_save_but_invalidates(
        self, service, mock_repository, mock_directory, mock_probe
    ):
        mock_repository.get_by_id.return_value = Tenant(
            id=TenantId(value="acme"), name="Acme", active=False
        )

        result = await service.deactivate_tenant(TenantId(value="acme"))

        assert result.active is False
        mock_repository.save.assert_not_awaited()
        mock_probe.tenant_activation_unchanged.assert_called_once_with(
            tenant_id="acme", active=False
        )
        mock_probe.tenant_activation_changed.assert_not_called()
        mock_directory.invalidate.assert_awaited_once_with("acme")


class TestQueries:
    """Tests for get/list."""

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, service, mock_probe):
        assert await service.get_tenant(TenantId(value="nope")) is None
        mock_probe.tenant_not_found.assert_called_once_with(tenant_id="nope")

    @pytest.mark.asyncio
    async def test_list(self, service, mock_repository, mock_probe):
        mock_repository.list_all.return_value = [Tenant.create(name="A"), Tenant.create(name="B")]

        tenants = await service.list_tenants()

        assert len(tenants) == 2
        mock_probe.tenants_listed.assert_called_once_with(count=2, inactive=0)

    @pytest.mark.asyncio
    async def test_list_counts_inactive(self, service, mock_repository, mock_probe):
        mock_repository.list_all.return_value = [
            Tenant.create(name="A"),
            Tenant(id=TenantId(value="b"), name="B", active=False),
        ]

        await service.list_tenants()

        mock_probe.tenants_listed.assert_called_once_with(count=2, inactive=1)

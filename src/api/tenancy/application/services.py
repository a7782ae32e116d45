"""Tenant application service for the tenancy bounded context.

Handles tenant administration: create, read, list, activate and
deactivate. Tenants are global records; they are not tenant-owned and are
managed only through administrative routes.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.application.observability.tenant_service_probe import InvalidationTrigger
from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    DuplicateTenantIdError,
    DuplicateTenantNameError,
    TenantNotFoundError,
)
from tenancy.ports.repositories import ITenantRepository, TenantDirectory


class TenantService:
    """Application service for tenant management.

    Changes to a tenant's active flag invalidate the directory entry after the
    transaction committed, so this process stops (or resumes) resolving the
    tenant immediately.
    """

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        directory: TenantDirectory,
        session: AsyncSession,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            tenant_repository: Repository for tenant persistence
            directory: Tenant directory whose cache is kept in step
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._tenant_repository = tenant_repository
        self._directory = directory
        self._session = session
        self._probe = probe or DefaultTenantServiceProbe()

    async def create_tenant(self, name: str, tenant_id: str | None = None) -> Tenant:
        """Create a new, active tenant.

        Args:
            name: The name of the tenant
            tenant_id: Optional chosen id (e.g. a subdomain label); a ULID is
                generated when omitted

        Returns:
            The created Tenant aggregate

        Raises:
            ValueError: If the name is empty or the id is malformed
            DuplicateTenantNameError: If a tenant with this name already exists
            DuplicateTenantIdError: If a tenant with this id already exists
        """
        chosen_id = TenantId.from_string(tenant_id) if tenant_id else None
        tenant = Tenant.create(name=name, tenant_id=chosen_id)

        async with self._session.begin():
            try:
                if chosen_id is not None:
                    existing = await self._tenant_repository.get_by_id(chosen_id)
                    if existing is not None:
                        raise DuplicateTenantIdError(
                            f"Tenant '{chosen_id.value}' already exists"
                        )
                await self._tenant_repository.save(tenant)
            except DuplicateTenantIdError:
                self._probe.duplicate_tenant(name=tenant.name, conflict="id")
                raise
            except DuplicateTenantNameError:
                self._probe.duplicate_tenant(name=tenant.name, conflict="name")
                raise

        self._probe.tenant_created(
            tenant_id=tenant.id.value, name=tenant.name, id_chosen=chosen_id is not None
        )
        # A negative lookup for this id may be cached.
        await self._invalidate(tenant.id.value, trigger="created")
        return tenant

    async def get_tenant(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by ID.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant aggregate, or None if not found
        """
        tenant = await self._tenant_repository.get_by_id(tenant_id)

        if tenant is None:
            self._probe.tenant_not_found(tenant_id=tenant_id.value)
            return None
        return tenant

    async def list_tenants(self) -> list[Tenant]:
        """List all tenants, active or not."""
        tenants = await self._tenant_repository.list_all()
        self._probe.tenants_listed(
            count=len(tenants), inactive=sum(1 for t in tenants if not t.active)
        )
        return tenants

    async def deactivate_tenant(self, tenant_id: TenantId) -> Tenant:
        """Stop a tenant from resolving for new requests.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        return await self._set_active(tenant_id, active=False)

    async def activate_tenant(self, tenant_id: TenantId) -> Tenant:
        """Allow a previously deactivated tenant to resolve again.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        return await self._set_active(tenant_id, active=True)

    async def _set_active(self, tenant_id: TenantId, active: bool) -> Tenant:
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(tenant_id)
            if tenant is None:
                self._probe.tenant_not_found(tenant_id=tenant_id.value)
                raise TenantNotFoundError(f"Tenant '{tenant_id.value}' not found")

            changed = tenant.active != active
            if changed:
                if active:
                    tenant.activate()
                else:
                    tenant.deactivate()
                await self._tenant_repository.save(tenant)

        if changed:
            self._probe.tenant_activation_changed(tenant_id=tenant_id.value, active=active)
        else:
            self._probe.tenant_activation_unchanged(tenant_id=tenant_id.value, active=active)
        # Invalidated even when unchanged: another process may have flipped
        # the flag while this one still caches the old answer.
        await self._invalidate(
            tenant_id.value, trigger="activated" if active else "deactivated"
        )
        return tenant

    async def _invalidate(self, tenant_id: str, trigger: InvalidationTrigger) -> None:
        await self._directory.invalidate(tenant_id)
        self._probe.directory_entry_invalidated(tenant_id=tenant_id, trigger=trigger)

"""SQLAlchemy implementation of ITenantRepository.

This repository manages tenant rows in the application database. Tenants
are simple aggregates: an id, a unique name and an active flag.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from tenancy.ports.exceptions import DuplicateTenantNameError
from tenancy.ports.repositories import ITenantRepository


def _to_domain(model: TenantModel) -> Tenant:
    return Tenant(id=TenantId(value=model.id), name=model.name, active=model.active)


class TenantRepository(ITenantRepository):
    """Repository managing storage for Tenant aggregates.

    The repository flushes but never commits; the caller owns the
    transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant row.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantNameError: If tenant name already exists
        """
        existing = await self.get_by_name(tenant.name)
        if existing and existing.id.value != tenant.id.value:
            self._probe.duplicate_tenant_name(tenant.name)
            raise DuplicateTenantNameError(f"Tenant '{tenant.name}' already exists")

        try:
            stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model:
                model.name = tenant.name
                model.active = tenant.active
            else:
                model = TenantModel(
                    id=tenant.id.value,
                    name=tenant.name,
                    active=tenant.active,
                )
                self._session.add(model)

            # Flush to surface integrity errors inside the caller's transaction
            await self._session.flush()
            self._probe.tenant_saved(tenant.id.value, tenant.active)

        except IntegrityError as e:
            if "name" in str(e.orig):
                self._probe.duplicate_tenant_name(tenant.name)
                raise DuplicateTenantNameError(
                    f"Tenant '{tenant.name}' already exists"
                ) from e
            raise

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Fetch a tenant by id.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant aggregate, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return _to_domain(model)

    async def get_by_name(self, name: str) -> Tenant | None:
        """Fetch tenant by name.

        Args:
            name: The tenant name

        Returns:
            The Tenant aggregate, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return _to_domain(model)

    async def list_all(self) -> list[Tenant]:
        """Fetch all tenants ordered by id.

        Returns:
            List of all Tenant aggregates
        """
        stmt = select(TenantModel).order_by(TenantModel.id)
        result = await self._session.execute(stmt)
        tenants = [_to_domain(model) for model in result.scalars().all()]

        self._probe.tenants_listed(len(tenants))
        return tenants

"""Tenant administration dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_session
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.application.services import TenantService
from tenancy.dependencies.directory import get_tenant_directory
from tenancy.infrastructure.tenant_directory import CachedTenantDirectory
from tenancy.infrastructure.tenant_repository import TenantRepository


def get_tenant_service_probe() -> TenantServiceProbe:
    """Get TenantServiceProbe instance.

    Returns:
        DefaultTenantServiceProbe instance for observability
    """
    return DefaultTenantServiceProbe()


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TenantRepository:
    """Get TenantRepository instance.

    Args:
        session: Async database session

    Returns:
        TenantRepository instance
    """
    return TenantRepository(session=session)


def get_tenant_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    directory: Annotated[CachedTenantDirectory, Depends(get_tenant_directory)],
    session: Annotated[AsyncSession, Depends(get_session)],
    tenant_service_probe: Annotated[
        TenantServiceProbe, Depends(get_tenant_service_probe)
    ],
) -> TenantService:
    """Get TenantService instance.

    Args:
        tenant_repo: Tenant repository (shares session via FastAPI dependency caching)
        directory: Shared tenant directory, invalidated on changes
        session: Database session for transaction management
        tenant_service_probe: Tenant service probe for observability

    Returns:
        TenantService instance
    """
    return TenantService(
        tenant_repository=tenant_repo,
        directory=directory,
        session=session,
        probe=tenant_service_probe,
    )

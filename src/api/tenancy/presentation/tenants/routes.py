"""HTTP routes for tenant administration.

Tenants are global records, so these routes do not resolve a tenant for the
request. Every route requires the administrative token.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from infrastructure.database.data_access import PrivilegedAccess
from tenancy.application.services import TenantService
from tenancy.dependencies.admin import require_privileged_access
from tenancy.dependencies.tenant import get_tenant_service
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    DuplicateTenantIdError,
    DuplicateTenantNameError,
    TenantNotFoundError,
)
from tenancy.presentation.tenants.models import CreateTenantRequest, TenantResponse

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


def _parse_tenant_id(tenant_id: str) -> TenantId:
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_tenant(
    request: CreateTenantRequest,
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Create a new tenant.

    Args:
        request: Tenant creation request (name, optional id)
        service: Tenant service for orchestration

    Returns:
        TenantResponse with created tenant details

    Raises:
        HTTPException: 400 if the name or id is invalid
        HTTPException: 409 if tenant name or id already exists
    """
    try:
        tenant = await service.create_tenant(name=request.name, tenant_id=request.id)
    except (DuplicateTenantNameError, DuplicateTenantIdError) as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return TenantResponse.from_domain(tenant)


@router.get("")
async def list_tenants(
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> list[TenantResponse]:
    """List all tenants, including deactivated ones."""
    tenants = await service.list_tenants()
    return [TenantResponse.from_domain(t) for t in tenants]


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID.

    Raises:
        HTTPException: 400 if tenant ID is invalid
        HTTPException: 404 if tenant not found
    """
    tenant = await service.get_tenant(_parse_tenant_id(tenant_id))
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        )
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/deactivate")
async def deactivate_tenant(
    tenant_id: str,
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Deactivate a tenant; its requests are rejected from now on.

    Raises:
        HTTPException: 404 if tenant not found
    """
    try:
        tenant = await service.deactivate_tenant(_parse_tenant_id(tenant_id))
    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/activate")
async def activate_tenant(
    tenant_id: str,
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Re-activate a tenant.

    Raises:
        HTTPException: 404 if tenant not found
    """
    try:
        tenant = await service.activate_tenant(_parse_tenant_id(tenant_id))
    except TenantNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    return TenantResponse.from_domain(tenant)

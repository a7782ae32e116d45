"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tenancy.domain.aggregates import Tenant


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(..., description="Tenant name", min_length=1, max_length=255)
    id: str | None = Field(
        default=None,
        description="Optional tenant id (letters, digits, '-', '_'); ULID when omitted",
        min_length=1,
        max_length=64,
    )


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID")
    name: str = Field(..., description="Tenant name")
    active: bool = Field(..., description="Whether the tenant resolves for requests")

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response.

        Args:
            tenant: Tenant domain aggregate

        Returns:
            TenantResponse
        """
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            active=tenant.active,
        )

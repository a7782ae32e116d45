"""Repository and directory protocols (ports) for the tenancy context.

``ITenantRepository`` persists Tenant aggregates for administration.
``TenantDirectory`` answers the read-mostly question asked on every request:
does this tenant exist and is it active?
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId

ValidationReason = Literal["active", "inactive", "not_found", "malformed"]


@dataclass(frozen=True)
class TenantValidation:
    """Outcome of a directory lookup.

    Attributes:
        tenant_id: The candidate that was looked up.
        valid: True only for an existing, active tenant.
        reason: Why the candidate is (in)valid.
    """

    tenant_id: str
    valid: bool
    reason: ValidationReason

    @classmethod
    def active(cls, tenant_id: str) -> TenantValidation:
        return cls(tenant_id=tenant_id, valid=True, reason="active")

    @classmethod
    def rejected(cls, tenant_id: str, reason: ValidationReason) -> TenantValidation:
        return cls(tenant_id=tenant_id, valid=False, reason=reason)


@runtime_checkable
class TenantDirectory(Protocol):
    """Authoritative answer to "is tenant X valid right now?".

    Implementations return a result for unknown tenants; they never raise
    for "not found". Storage failures do propagate.
    """

    async def validate(self, tenant_id: str) -> TenantValidation:
        """Check whether a tenant exists and is active.

        Args:
            tenant_id: Raw candidate identifier

        Returns:
            TenantValidation describing the outcome
        """
        ...

    async def invalidate(self, tenant_id: str) -> None:
        """Drop any cached knowledge about a tenant."""
        ...


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence."""

    async def save(self, tenant: Tenant) -> None:
        """Persist a tenant aggregate (insert or update).

        Raises:
            DuplicateTenantNameError: If the name is taken by another tenant
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by id, or None if not found."""
        ...

    async def get_by_name(self, name: str) -> Tenant | None:
        """Retrieve a tenant by name, or None if not found."""
        ...

    async def list_all(self) -> list[Tenant]:
        """List all tenants."""
        ...

"""Tenant aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass

from tenancy.domain.value_objects import TenantId


@dataclass
class Tenant:
    """Tenant aggregate representing an organization whose data is isolated.

    Business rules:
    - Tenant ids are immutable once created
    - Tenant names are globally unique
    - Only active tenants can be resolved for inbound requests
    """

    id: TenantId
    name: str
    active: bool = True

    @classmethod
    def create(cls, name: str, tenant_id: TenantId | None = None) -> Tenant:
        """Factory method for creating a new, active tenant.

        Args:
            name: Display name of the tenant
            tenant_id: Chosen id; a ULID is generated when omitted

        Returns:
            A new Tenant aggregate
        """
        name = name.strip()
        if not name:
            raise ValueError("Tenant name must not be empty")
        return cls(id=tenant_id or TenantId.generate(), name=name, active=True)

    def deactivate(self) -> None:
        """Stop the tenant from resolving for new requests."""
        self.active = False

    def activate(self) -> None:
        """Allow the tenant to resolve again."""
        self.active = True

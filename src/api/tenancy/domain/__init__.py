"""Tenancy domain layer."""

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId

__all__ = ["Tenant", "TenantId"]

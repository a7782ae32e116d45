"""Tenancy infrastructure: persistence and the tenant directory."""

from tenancy.infrastructure.tenant_directory import (
    CachedTenantDirectory,
    RepositoryTenantDirectory,
)
from tenancy.infrastructure.tenant_repository import TenantRepository

__all__ = [
    "CachedTenantDirectory",
    "RepositoryTenantDirectory",
    "TenantRepository",
]

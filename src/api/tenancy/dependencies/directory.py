"""Process-wide tenant directory.

The cached directory is the only state shared across concurrent requests.
It is created on first use and lives until ``reset_tenant_directory()``.
"""

from __future__ import annotations

from infrastructure.database.dependencies import get_sessionmaker
from infrastructure.settings import get_tenancy_settings
from tenancy.infrastructure.tenant_directory import (
    CachedTenantDirectory,
    RepositoryTenantDirectory,
)

_directory: CachedTenantDirectory | None = None


def get_tenant_directory() -> CachedTenantDirectory:
    """Get the shared tenant directory (singleton).

    Returns:
        Cached directory backed by the tenants table
    """
    global _directory
    if _directory is None:
        settings = get_tenancy_settings()
        _directory = CachedTenantDirectory(
            RepositoryTenantDirectory(get_sessionmaker()),
            ttl_seconds=settings.directory_cache_ttl_seconds,
            negative_ttl_seconds=settings.directory_negative_cache_ttl_seconds,
        )
    return _directory


def reset_tenant_directory() -> None:
    """Drop the shared directory (shutdown and tests)."""
    global _directory
    _directory = None

"""Observability for tenancy infrastructure."""

from tenancy.infrastructure.observability.directory_probe import (
    DefaultTenantDirectoryProbe,
    TenantDirectoryProbe,
)
from tenancy.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = [
    "DefaultTenantDirectoryProbe",
    "DefaultTenantRepositoryProbe",
    "TenantDirectoryProbe",
    "TenantRepositoryProbe",
]

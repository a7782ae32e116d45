"""Tenant-isolated data access.

Business code reaches persistence only through ``DataAccessSession``.
"""

from infrastructure.database.data_access.interceptors import (
    PendingChanges,
    PrePersistInterceptor,
    TenantOwnershipValidator,
    TenantStampingInterceptor,
    default_interceptors,
)
from infrastructure.database.data_access.observability import (
    DataAccessProbe,
    DefaultDataAccessProbe,
)
from infrastructure.database.data_access.privileges import PrivilegedAccess
from infrastructure.database.data_access.registry import (
    TenantOwnedRegistry,
    tenant_owned,
    tenant_owned_registry,
)
from infrastructure.database.data_access.session import (
    DataAccessSession,
    UnresolvedReadPolicy,
)

__all__ = [
    "DataAccessProbe",
    "DataAccessSession",
    "DefaultDataAccessProbe",
    "PendingChanges",
    "PrePersistInterceptor",
    "PrivilegedAccess",
    "TenantOwnedRegistry",
    "TenantOwnershipValidator",
    "TenantStampingInterceptor",
    "UnresolvedReadPolicy",
    "default_interceptors",
    "tenant_owned",
    "tenant_owned_registry",
]

"""Tenancy application layer: tenant resolution and administration."""

from tenancy.application.resolver import (
    ClaimTenantStrategy,
    HeaderTenantStrategy,
    RequestMetadata,
    ResolutionPolicy,
    SubdomainTenantStrategy,
    TenantResolver,
    TenantSignalRejected,
    TenantSignalStrategy,
    build_strategy,
)
from tenancy.application.services import TenantService

__all__ = [
    "ClaimTenantStrategy",
    "HeaderTenantStrategy",
    "RequestMetadata",
    "ResolutionPolicy",
    "SubdomainTenantStrategy",
    "TenantResolver",
    "TenantService",
    "TenantSignalRejected",
    "TenantSignalStrategy",
    "build_strategy",
]

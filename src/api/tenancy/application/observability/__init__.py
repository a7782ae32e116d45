"""Observability for tenancy application services."""

from tenancy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "DefaultTenantServiceProbe",
    "TenantServiceProbe",
]

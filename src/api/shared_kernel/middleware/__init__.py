"""Shared tenant isolation primitives.

The tenant context value object, the per-request scope that enforces single
assignment and resolution ordering, and the error taxonomy shared by the
tenancy and catalog bounded contexts.
"""

from shared_kernel.middleware.exceptions import (
    CrossTenantAttemptError,
    InvalidTenantError,
    MissingTenantError,
    OrderingViolationError,
    TenancyError,
    TenantContextAlreadySetError,
    TenantRequiredError,
)
from shared_kernel.middleware.tenant_context import (
    RequestTenantScope,
    TenantContext,
    TenantSource,
)

__all__ = [
    "CrossTenantAttemptError",
    "InvalidTenantError",
    "MissingTenantError",
    "OrderingViolationError",
    "RequestTenantScope",
    "TenancyError",
    "TenantContext",
    "TenantContextAlreadySetError",
    "TenantRequiredError",
    "TenantSource",
]

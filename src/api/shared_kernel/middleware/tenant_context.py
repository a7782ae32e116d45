"""Tenant context value object and the per-request scope that holds it.

``TenantContext`` is the pure value object describing which tenant a request
belongs to. ``RequestTenantScope`` is the request-scoped holder that enforces
single assignment and the ordering rule: nothing tenant-dependent may run
before resolution for the request has completed.

Both are framework-agnostic. The FastAPI wiring that creates a scope per
request and settles it lives in the tenancy bounded context's dependency
layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shared_kernel.middleware.exceptions import (
    OrderingViolationError,
    TenantContextAlreadySetError,
)

TenantSource = Literal["header", "claim", "subdomain", "none"]


@dataclass(frozen=True)
class TenantContext:
    """Resolved (or explicitly unresolved) tenant context for a request.

    Attributes:
        tenant_id: The validated tenant identifier, or None when the request
            was allowed through without a tenant (lenient policy only).
        source: Which signal produced the tenant: 'header', 'claim',
            'subdomain', or 'none' for an unresolved context.
    """

    tenant_id: str | None
    source: TenantSource

    @classmethod
    def unresolved(cls) -> TenantContext:
        """Build the context every consumer must treat as a hard stop."""
        return cls(tenant_id=None, source="none")

    @property
    def resolved(self) -> bool:
        return self.tenant_id is not None


class RequestTenantScope:
    """Single-assignment holder for the tenant context of one request.

    A scope starts unsettled. Resolution settles it exactly once, either with
    a resolved context or (lenient policy) with an unresolved one. Reading
    ``context`` before that returns the unresolved value.

    The scope is owned by a single request and is never shared, so it carries
    no locking.
    """

    def __init__(self) -> None:
        self._context: TenantContext | None = None

    @property
    def is_settled(self) -> bool:
        """Whether tenant resolution has completed for this request."""
        return self._context is not None

    @property
    def context(self) -> TenantContext:
        """The settled context, or the unresolved value if not yet settled."""
        if self._context is None:
            return TenantContext.unresolved()
        return self._context

    def settle(self, context: TenantContext) -> None:
        """Record the outcome of tenant resolution.

        Args:
            context: The context produced by the resolver.

        Raises:
            TenantContextAlreadySetError: If the scope was already settled.
        """
        if self._context is not None:
            raise TenantContextAlreadySetError(
                f"Tenant context already settled to {self._context.tenant_id!r}; "
                f"refusing to change it to {context.tenant_id!r}"
            )
        self._context = context

    def require_settled(self, operation: str) -> TenantContext:
        """Return the settled context or fail if resolution has not completed.

        Used before constructing a data access session and before any
        authorization decision that depends on tenant identity.

        Args:
            operation: Human-readable name of the guarded operation.

        Raises:
            OrderingViolationError: If resolution has not completed yet.
        """
        if self._context is None:
            raise OrderingViolationError(
                f"'{operation}' attempted before tenant resolution completed"
            )
        return self._context

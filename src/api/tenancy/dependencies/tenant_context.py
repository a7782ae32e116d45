"""Tenant context FastAPI dependencies.

Resolves the tenant of the current request and records it on the request's
``RequestTenantScope``.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        tenant: Annotated[TenantContext, Depends(resolve_tenant_context)],
    ):
        # tenant.tenant_id is the validated tenant id
        ...

Routes normally depend on ``get_data_access_session`` instead, which
depends on ``resolve_tenant_context`` itself.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Request

from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware.tenant_context import RequestTenantScope, TenantContext
from tenancy.application.resolver import RequestMetadata, TenantResolver, build_strategy
from tenancy.dependencies.directory import get_tenant_directory
from tenancy.infrastructure.tenant_directory import CachedTenantDirectory


def get_tenant_scope(request: Request) -> RequestTenantScope:
    """Get the tenant scope of this request, creating it on first use."""
    scope = getattr(request.state, "tenant_scope", None)
    if scope is None:
        scope = RequestTenantScope()
        request.state.tenant_scope = scope
    return scope


def get_request_metadata(request: Request) -> RequestMetadata:
    """Build the transport-neutral request view used by tenant strategies."""
    return RequestMetadata.from_headers(request.headers)


def get_tenant_resolver(
    directory: Annotated[CachedTenantDirectory, Depends(get_tenant_directory)],
) -> TenantResolver:
    """Get a TenantResolver configured from tenancy settings."""
    settings = get_tenancy_settings()
    return TenantResolver(
        strategy=build_strategy(settings),
        directory=directory,
        policy=settings.policy,
    )


async def resolve_tenant_context(
    scope: Annotated[RequestTenantScope, Depends(get_tenant_scope)],
    metadata: Annotated[RequestMetadata, Depends(get_request_metadata)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> TenantContext:
    """Resolve the request's tenant and settle its scope.

    The scope is settled only after ``resolve()`` returned. A failed or
    cancelled resolution leaves it unsettled, so nothing downstream can
    open a data access session for the request.

    Raises:
        MissingTenantError: No tenant signal (strict policy)
        InvalidTenantError: Unknown, inactive or unverifiable tenant
    """
    if scope.is_settled:
        return scope.context

    context = await resolver.resolve(metadata)
    scope.settle(context)
    structlog.contextvars.bind_contextvars(tenant_id=context.tenant_id)
    return context


def get_settled_tenant_context(
    scope: Annotated[RequestTenantScope, Depends(get_tenant_scope)],
) -> TenantContext:
    """Read the tenant for a tenant-dependent decision.

    Does not trigger resolution. Use it in dependencies that must run after
    ``resolve_tenant_context``.

    Raises:
        OrderingViolationError: If resolution has not completed
    """
    return scope.require_settled("tenant-dependent authorization")

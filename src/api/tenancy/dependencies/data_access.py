"""Data access session dependencies.

``get_data_access_session`` is the only way tenant-scoped routes obtain
persistence. It depends on ``resolve_tenant_context``, so FastAPI always
runs resolution first, and it builds the session through
``DataAccessSession.for_request``, which refuses an unsettled scope.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.data_access import (
    DataAccessSession,
    PrivilegedAccess,
    UnresolvedReadPolicy,
)
from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware.tenant_context import RequestTenantScope, TenantContext
from tenancy.dependencies.admin import require_privileged_access
from tenancy.dependencies.tenant_context import get_tenant_scope, resolve_tenant_context


def get_data_access_session(
    _tenant: Annotated[TenantContext, Depends(resolve_tenant_context)],
    scope: Annotated[RequestTenantScope, Depends(get_tenant_scope)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DataAccessSession:
    """Get the tenant-isolated session for this request.

    Raises:
        OrderingViolationError: If the scope was not settled
    """
    return DataAccessSession.for_request(
        scope,
        session,
        unresolved_read_policy=UnresolvedReadPolicy(
            get_tenancy_settings().unresolved_read_policy
        ),
    )


def get_admin_data_access_session(
    _access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DataAccessSession:
    """Get a session for administrative routes.

    The session has no tenant: filtered reads and all writes of tenant-owned
    types are refused. Cross-tenant reads go through ``bypass_filter`` with
    the ``PrivilegedAccess`` capability.
    """
    return DataAccessSession(session, TenantContext.unresolved())

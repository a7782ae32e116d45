"""FastAPI dependencies of the tenancy bounded context.

The chain ``get_tenant_scope`` -> ``resolve_tenant_context`` ->
``get_data_access_session`` is the request lifecycle: a data access session
can only be built once resolution has settled the request's scope.
"""

from tenancy.dependencies.admin import ADMIN_TOKEN_HEADER, require_privileged_access
from tenancy.dependencies.data_access import (
    get_admin_data_access_session,
    get_data_access_session,
)
from tenancy.dependencies.directory import get_tenant_directory, reset_tenant_directory
from tenancy.dependencies.tenant import get_tenant_repository, get_tenant_service
from tenancy.dependencies.tenant_context import (
    get_request_metadata,
    get_settled_tenant_context,
    get_tenant_resolver,
    get_tenant_scope,
    resolve_tenant_context,
)

__all__ = [
    "ADMIN_TOKEN_HEADER",
    "get_admin_data_access_session",
    "get_data_access_session",
    "get_request_metadata",
    "get_settled_tenant_context",
    "get_tenant_directory",
    "get_tenant_repository",
    "get_tenant_resolver",
    "get_tenant_scope",
    "get_tenant_service",
    "require_privileged_access",
    "reset_tenant_directory",
    "resolve_tenant_context",
]

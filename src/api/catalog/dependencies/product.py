"""Product service dependencies.

The tenant-scoped service is built on ``get_data_access_session``, so the
request's tenant is always resolved before the service exists. Its probe
is bound to the settled tenant, read after the session dependency.
"""

from typing import Annotated

from fastapi import Depends

from catalog.application.observability import (
    DefaultProductServiceProbe,
    ProductServiceProbe,
)
from catalog.application.services import ProductService
from infrastructure.database.data_access import DataAccessSession
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.observability_context import ObservationContext
from tenancy.dependencies.data_access import (
    get_admin_data_access_session,
    get_data_access_session,
)
from tenancy.dependencies.tenant_context import get_settled_tenant_context


def get_product_service_probe() -> ProductServiceProbe:
    """Get ProductServiceProbe instance.

    Returns:
        DefaultProductServiceProbe instance for observability
    """
    return DefaultProductServiceProbe()


def get_product_service(
    data: Annotated[DataAccessSession, Depends(get_data_access_session)],
    # Declared after ``data``: FastAPI solves dependencies in order.
    tenant: Annotated[TenantContext, Depends(get_settled_tenant_context)],
    probe: Annotated[ProductServiceProbe, Depends(get_product_service_probe)],
) -> ProductService:
    """Get ProductService bound to the request's tenant."""
    context = ObservationContext(
        tenant_id=tenant.tenant_id,
        extra={"tenant_source": tenant.source},
    )
    return ProductService(data=data, probe=probe.with_context(context))


def get_admin_product_service(
    data: Annotated[DataAccessSession, Depends(get_admin_data_access_session)],
    probe: Annotated[ProductServiceProbe, Depends(get_product_service_probe)],
) -> ProductService:
    """Get ProductService for administrative, cross-tenant routes."""
    return ProductService(data=data, probe=probe)

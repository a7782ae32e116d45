"""FastAPI dependencies of the catalog bounded context."""

from catalog.dependencies.product import (
    get_admin_product_service,
    get_product_service,
    get_product_service_probe,
)

__all__ = [
    "get_admin_product_service",
    "get_product_service",
    "get_product_service_probe",
]

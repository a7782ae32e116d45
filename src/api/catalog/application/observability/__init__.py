"""Observability for catalog application services."""

from catalog.application.observability.product_service_probe import (
    DefaultProductServiceProbe,
    ProductServiceProbe,
)

__all__ = [
    "DefaultProductServiceProbe",
    "ProductServiceProbe",
]

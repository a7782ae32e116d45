"""Ports of the catalog bounded context."""

from catalog.ports.exceptions import DuplicateSkuError, ProductNotFoundError

__all__ = ["DuplicateSkuError", "ProductNotFoundError"]

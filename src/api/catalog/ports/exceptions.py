"""Exceptions of the catalog bounded context."""


class DuplicateSkuError(Exception):
    """Raised when a SKU is already used by another product of the same tenant."""

    pass


class ProductNotFoundError(Exception):
    """Raised when a product does not exist for the current tenant.

    Products of other tenants are reported exactly like missing ones.
    """

    pass

"""Domain exceptions for the tenancy bounded context.

These exceptions represent errors of tenant administration. They are caught
and translated by the presentation layer. They are distinct from the
resolution and isolation errors in ``shared_kernel.middleware.exceptions``.
"""


class DuplicateTenantNameError(Exception):
    """Raised when attempting to create a tenant with a name that already exists.

    Tenant names are globally unique across the system.
    """

    pass


class DuplicateTenantIdError(Exception):
    """Raised when attempting to create a tenant with an id that already exists."""

    pass


class TenantNotFoundError(Exception):
    """Raised when an administrative operation targets an unknown tenant."""

    pass

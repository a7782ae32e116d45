"""Tenant isolation error taxonomy.

Each error carries a stable machine-readable code and the HTTP status the
presentation layer responds with. They are raised by resolution and by the
data access layer; lookups against the tenant directory never raise them for
"not found".
"""

from __future__ import annotations


class TenancyError(Exception):
    """Base class for tenant isolation failures with a stable error code."""

    code: str = "TENANCY_ERROR"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingTenantError(TenancyError):
    """No tenant signal present on the inbound request (strict policy)."""

    code = "MISSING_TENANT"
    status_code = 400


class InvalidTenantError(TenancyError):
    """Tenant signal present but unknown, inactive, or unverifiable."""

    code = "INVALID_TENANT"
    status_code = 401


class TenantRequiredError(TenancyError):
    """Tenant-owned read or write attempted without a resolved tenant."""

    code = "TENANT_REQUIRED"
    status_code = 403


class CrossTenantAttemptError(TenancyError):
    """Access outside the session's tenant without the privileged capability."""

    code = "CROSS_TENANT_ATTEMPT"
    status_code = 403


class OrderingViolationError(TenancyError):
    """Tenant-dependent work started before resolution completed.

    This is a defect in request wiring, not a client error.
    """

    code = "ORDERING_VIOLATION"
    status_code = 500


class TenantContextAlreadySetError(RuntimeError):
    """Raised when a settled tenant scope is assigned a second time."""

    pass

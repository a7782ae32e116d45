"""Unit tests for the tenant isolation error taxonomy."""

from __future__ import annotations

import pytest

from shared_kernel.middleware.exceptions import (
    CrossTenantAttemptError,
    InvalidTenantError,
    MissingTenantError,
    OrderingViolationError,
    TenancyError,
    TenantContextAlreadySetError,
    TenantRequiredError,
)


@pytest.mark.parametrize(
    ("error_type", "code", "status_code"),
    [
        (MissingTenantError, "MISSING_TENANT", 400),
        (InvalidTenantError, "INVALID_TENANT", 401),
        (TenantRequiredError, "TENANT_REQUIRED", 403),
        (CrossTenantAttemptError, "CROSS_TENANT_ATTEMPT", 403),
        (OrderingViolationError, "ORDERING_VIOLATION", 500),
    ],
)
def test_error_codes_and_statuses_are_stable(error_type, code, status_code):
    """Each error kind maps to a fixed code and HTTP status."""
    error = error_type("boom")

    assert isinstance(error, TenancyError)
    assert error.code == code
    assert error.status_code == status_code
    assert error.message == "boom"
    assert str(error) == "boom"


def test_already_set_is_a_programming_error_not_a_tenancy_error():
    """Double assignment is not reported to clients as a tenant error."""
    assert issubclass(TenantContextAlreadySetError, RuntimeError)
    assert not issubclass(TenantContextAlreadySetError, TenancyError)

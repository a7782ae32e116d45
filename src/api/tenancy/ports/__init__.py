"""Ports (interfaces) of the tenancy bounded context."""

from tenancy.ports.exceptions import (
    DuplicateTenantIdError,
    DuplicateTenantNameError,
    TenantNotFoundError,
)
from tenancy.ports.repositories import (
    ITenantRepository,
    TenantDirectory,
    TenantValidation,
    ValidationReason,
)

__all__ = [
    "DuplicateTenantIdError",
    "DuplicateTenantNameError",
    "ITenantRepository",
    "TenantDirectory",
    "TenantNotFoundError",
    "TenantValidation",
    "ValidationReason",
]

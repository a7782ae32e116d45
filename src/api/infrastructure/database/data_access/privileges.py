"""Capability required to read across tenants.

Administrative code paths obtain a ``PrivilegedAccess`` value from a
dedicated dependency and pass it explicitly to
``DataAccessSession.bypass_filter``. Nothing else in the data access layer
accepts or produces it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PrivilegedAccess:
    """Proof that the caller passed an administrative check.

    Attributes:
        granted_to: Who or what was granted access (for audit logging).
        reason: Why cross-tenant access is needed.
    """

    granted_to: str
    reason: str

    @classmethod
    def grant(cls, granted_to: str, reason: str) -> PrivilegedAccess:
        """Issue a capability. Call only after an administrative check."""
        if not granted_to.strip():
            raise ValueError("granted_to must not be empty")
        return cls(granted_to=granted_to, reason=reason)

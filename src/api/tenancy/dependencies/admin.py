"""Administrative access dependency.

Administrative routes present the ``X-Admin-Token`` header. It is compared
in constant time with ``MULTITENANT_TENANCY_ADMIN_TOKEN``; an empty setting
disables administrative routes entirely.
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Header, HTTPException, status

from infrastructure.database.data_access import PrivilegedAccess
from infrastructure.settings import get_tenancy_settings

ADMIN_TOKEN_HEADER = "X-Admin-Token"


def require_privileged_access(
    x_admin_token: Annotated[str | None, Header(alias=ADMIN_TOKEN_HEADER)] = None,
) -> PrivilegedAccess:
    """Grant cross-tenant access to callers presenting the admin token.

    Raises:
        HTTPException 403: Token missing, wrong, or not configured
    """
    configured = get_tenancy_settings().admin_token.get_secret_value()
    if not configured or x_admin_token is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative access denied",
        )

    if not hmac.compare_digest(x_admin_token.encode(), configured.encode()):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative access denied",
        )

    return PrivilegedAccess.grant(granted_to="admin-token", reason="administrative route")

"""Tenancy presentation layer.

Tenant administration routes and the exception handlers translating tenant
isolation and storage errors into HTTP responses.
"""

from __future__ import annotations

from tenancy.presentation.errors import register_exception_handlers
from tenancy.presentation.tenants.routes import router

__all__ = ["register_exception_handlers", "router"]

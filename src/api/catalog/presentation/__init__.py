"""Catalog presentation layer."""

from __future__ import annotations

from catalog.presentation.products.routes import admin_router, router

__all__ = ["admin_router", "router"]

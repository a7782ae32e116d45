"""Catalog application layer."""

from catalog.application.services import ProductService

__all__ = ["ProductService"]

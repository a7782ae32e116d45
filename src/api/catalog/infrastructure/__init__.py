"""Catalog infrastructure: ORM models."""

from catalog.infrastructure.models import ProductModel

__all__ = ["ProductModel"]

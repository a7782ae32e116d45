"""Pydantic models for product API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from catalog.infrastructure.models import ProductModel


class CreateProductRequest(BaseModel):
    """Request model for creating a product.

    ``tenant_id`` is accepted for compatibility with existing clients but
    has no effect: products always belong to the tenant of the request.
    """

    name: str = Field(..., description="Product name", min_length=1, max_length=255)
    sku: str = Field(..., description="SKU, unique per tenant", min_length=1, max_length=64)
    description: str | None = Field(default=None, description="Product description")
    tenant_id: str | None = Field(
        default=None,
        description="Ignored; the request's tenant owns the product",
    )


class UpdateProductRequest(BaseModel):
    """Request model for a partial product update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    sku: str | None = Field(default=None, min_length=1, max_length=64)
    description: str | None = None


class ProductResponse(BaseModel):
    """Response model for product."""

    id: str = Field(..., description="Product ID (ULID format)")
    tenant_id: str = Field(..., description="Owning tenant")
    name: str
    sku: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, product: ProductModel) -> ProductResponse:
        """Convert a product row to an API response.

        Args:
            product: Product ORM instance

        Returns:
            ProductResponse
        """
        return cls(
            id=product.id,
            tenant_id=product.tenant_id,
            name=product.name,
            sku=product.sku,
            description=product.description,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

"""HTTP routes for products.

``router`` serves the request's tenant only. ``admin_router`` lists products
of every tenant and requires the administrative token.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from catalog.application.services import ProductService
from catalog.dependencies.product import get_admin_product_service, get_product_service
from catalog.ports.exceptions import DuplicateSkuError, ProductNotFoundError
from catalog.presentation.products.models import (
    CreateProductRequest,
    ProductResponse,
    UpdateProductRequest,
)
from infrastructure.database.data_access import PrivilegedAccess
from tenancy.dependencies.admin import require_privileged_access

router = APIRouter(
    prefix="/products",
    tags=["products"],
)

admin_router = APIRouter(
    prefix="/admin/products",
    tags=["admin"],
)


@router.get("")
async def list_products(
    service: Annotated[ProductService, Depends(get_product_service)],
) -> list[ProductResponse]:
    """List the products of the request's tenant."""
    products = await service.list_products()
    return [ProductResponse.from_model(p) for p in products]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    request: CreateProductRequest,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    """Create a product owned by the request's tenant.

    Raises:
        HTTPException: 409 if the SKU is already used by this tenant
    """
    try:
        product = await service.create_product(
            name=request.name,
            sku=request.sku,
            description=request.description,
            tenant_id=request.tenant_id,
        )
    except DuplicateSkuError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return ProductResponse.from_model(product)


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    """Get a product by ID.

    Products of other tenants are reported as not found.

    Raises:
        HTTPException: 404 if the product is not visible to this tenant
    """
    product = await service.get_product(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product {product_id} not found",
        )
    return ProductResponse.from_model(product)


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    """Update fields of a product.

    Raises:
        HTTPException: 404 if the product is not visible to this tenant
        HTTPException: 409 if the new SKU is already used by this tenant
    """
    try:
        product = await service.update_product(
            product_id,
            name=request.name,
            sku=request.sku,
            description=request.description,
        )
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except DuplicateSkuError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return ProductResponse.from_model(product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_product(
    product_id: str,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> Response:
    """Delete a product.

    Raises:
        HTTPException: 404 if the product is not visible to this tenant
    """
    try:
        await service.delete_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@admin_router.get("")
async def list_all_products(
    access: Annotated[PrivilegedAccess, Depends(require_privileged_access)],
    service: Annotated[ProductService, Depends(get_admin_product_service)],
) -> list[ProductResponse]:
    """List products of every tenant."""
    products = await service.list_all_products(access)
    return [ProductResponse.from_model(p) for p in products]

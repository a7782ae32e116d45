"""Product application service for the catalog bounded context.

All persistence goes through a ``DataAccessSession``. The service never
filters or stamps by tenant itself; it cannot see, change or delete
another tenant's products because the session will not hand them out.
"""

from __future__ import annotations

from ulid import ULID

from catalog.application.observability import (
    DefaultProductServiceProbe,
    ProductServiceProbe,
)
from catalog.infrastructure.models import ProductModel
from catalog.ports.exceptions import DuplicateSkuError, ProductNotFoundError
from infrastructure.database.data_access import DataAccessSession, PrivilegedAccess


class ProductService:
    """Application service for product management."""

    def __init__(
        self,
        data: DataAccessSession,
        probe: ProductServiceProbe | None = None,
    ):
        """Initialize ProductService with dependencies.

        Args:
            data: Tenant-isolated data access session of the request
            probe: Optional domain probe for observability
        """
        self._data = data
        self._probe = probe or DefaultProductServiceProbe()

    async def list_products(self) -> list[ProductModel]:
        """List the current tenant's products, oldest first."""
        products = await self._data.read(
            ProductModel,
            order_by=(ProductModel.created_at, ProductModel.id),
        )
        self._probe.products_listed(count=len(products))
        return products

    async def get_product(self, product_id: str) -> ProductModel | None:
        """Retrieve a product of the current tenant.

        Returns:
            The product, or None if it does not exist for this tenant
        """
        product = await self._data.direct_lookup(ProductModel, product_id)
        if product is None:
            self._probe.product_not_found(product_id=product_id)
        return product

    async def create_product(
        self,
        name: str,
        sku: str,
        description: str | None = None,
        tenant_id: str | None = None,
    ) -> ProductModel:
        """Create a product for the current tenant.

        Args:
            name: Product name
            sku: Stock keeping unit, unique within the tenant
            description: Optional description
            tenant_id: Caller-supplied owner. Always replaced by the
                session's tenant when the product is persisted.

        Raises:
            DuplicateSkuError: If the tenant already has a product with this SKU
            TenantRequiredError: If the request has no tenant
        """
        await self._ensure_sku_available(sku)

        product = ProductModel(
            id=str(ULID()),
            name=name,
            sku=sku,
            description=description,
            tenant_id=tenant_id,
        )
        await self._data.write(product)

        self._probe.product_created(product_id=product.id, sku=sku)
        return product

    async def update_product(
        self,
        product_id: str,
        name: str | None = None,
        sku: str | None = None,
        description: str | None = None,
    ) -> ProductModel:
        """Change fields of a product of the current tenant.

        Raises:
            ProductNotFoundError: If the product is not visible to this tenant
            DuplicateSkuError: If the new SKU is taken within the tenant
        """
        product = await self._require_product(product_id)

        changed: list[str] = []
        if sku is not None and sku != product.sku:
            await self._ensure_sku_available(sku)
            product.sku = sku
            changed.append("sku")
        if name is not None and name != product.name:
            product.name = name
            changed.append("name")
        if description is not None and description != product.description:
            product.description = description
            changed.append("description")

        if changed:
            await self._data.save_changes()
            self._probe.product_updated(product_id=product_id, fields=changed)
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product of the current tenant.

        Raises:
            ProductNotFoundError: If the product is not visible to this tenant
        """
        product = await self._require_product(product_id)
        await self._data.delete(product)
        await self._data.save_changes()
        self._probe.product_deleted(product_id=product_id)

    async def list_all_products(self, access: PrivilegedAccess) -> list[ProductModel]:
        """List products of every tenant. Administrative use only.

        Raises:
            CrossTenantAttemptError: Without a privileged capability
        """
        products = await self._data.bypass_filter(
            ProductModel,
            capability=access,
            order_by=(ProductModel.tenant_id, ProductModel.created_at, ProductModel.id),
        )
        self._probe.all_products_listed(count=len(products), granted_to=access.granted_to)
        return products

    async def _require_product(self, product_id: str) -> ProductModel:
        product = await self.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    async def _ensure_sku_available(self, sku: str) -> None:
        existing = await self._data.read(ProductModel, ProductModel.sku == sku, limit=1)
        if existing:
            self._probe.duplicate_sku(sku=sku)
            raise DuplicateSkuError(f"A product with SKU '{sku}' already exists")

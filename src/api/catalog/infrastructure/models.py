"""SQLAlchemy ORM models for the catalog bounded context."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.data_access import tenant_owned
from infrastructure.database.models import Base, TenantOwnedMixin, TimestampMixin


@tenant_owned
class ProductModel(Base, TimestampMixin, TenantOwnedMixin):
    """ORM model for products.

    SKUs are unique per tenant; two tenants may use the same SKU.
    """

    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="uq_products_tenant_sku"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sku: Mapped[str] = mapped_column(String(64), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ProductModel(id={self.id}, tenant_id={self.tenant_id}, sku={self.sku})>"

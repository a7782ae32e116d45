"""SQLAlchemy ORM model for the tenants table.

Tenants are the top-level isolation boundary. Rows are administered out of
band and read on every request through the tenant directory.
"""

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import TENANT_ID_LENGTH, Base, TimestampMixin


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Note: Tenant names are globally unique across the entire system.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(TENANT_ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, name={self.name}, active={self.active})>"

"""SQLAlchemy declarative base and shared model mixins.

This module provides the declarative base class for all SQLAlchemy ORM models,
the timestamp mixin, and the column mixin for tenant-owned tables.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

TENANT_ID_LENGTH = 64


def _utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    Ensures proper INSERT-time evaluation.
    """
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns.

    Uses timezone-aware UTC timestamps with Python-side default generation.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        onupdate=_utc_now,  # Evaluated at UPDATE time
        nullable=False,
    )


class TenantOwnedMixin:
    """Mixin declaring the ``tenant_id`` column of a tenant-owned table.

    The column only describes storage. A model takes part in isolation when
    it is also registered with ``@tenant_owned``; the data access session
    never infers ownership from this mixin.
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[str]:
        return mapped_column(
            String(TENANT_ID_LENGTH),
            ForeignKey("tenants.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        )

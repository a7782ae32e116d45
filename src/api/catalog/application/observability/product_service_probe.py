"""Protocol for product application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ProductServiceProbe(Protocol):
    """Domain probe for product application service operations."""

    def product_created(self, product_id: str, sku: str) -> None:
        """Record that a product was created for the bound tenant."""
        ...

    def product_updated(self, product_id: str, fields: list[str]) -> None:
        """Record that a product was updated."""
        ...

    def product_deleted(self, product_id: str) -> None:
        """Record that a product was deleted."""
        ...

    def product_not_found(self, product_id: str) -> None:
        """Record that a product was not visible to the current tenant."""
        ...

    def products_listed(self, count: int) -> None:
        """Record that products were listed."""
        ...

    def all_products_listed(self, count: int, granted_to: str) -> None:
        """Record an administrative cross-tenant listing."""
        ...

    def duplicate_sku(self, sku: str) -> None:
        """Record that a SKU clash was detected."""
        ...

    def with_context(self, context: ObservationContext) -> ProductServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProductServiceProbe:
    """Default implementation of ProductServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultProductServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultProductServiceProbe(logger=self._logger, context=context)

    def product_created(self, product_id: str, sku: str) -> None:
        self._logger.info(
            "product_created",
            product_id=product_id,
            sku=sku,
            **self._get_context_kwargs(),
        )

    def product_updated(self, product_id: str, fields: list[str]) -> None:
        self._logger.info(
            "product_updated",
            product_id=product_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def product_deleted(self, product_id: str) -> None:
        self._logger.info(
            "product_deleted",
            product_id=product_id,
            **self._get_context_kwargs(),
        )

    def product_not_found(self, product_id: str) -> None:
        self._logger.debug(
            "product_not_found",
            product_id=product_id,
            **self._get_context_kwargs(),
        )

    def products_listed(self, count: int) -> None:
        self._logger.debug(
            "products_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def all_products_listed(self, count: int, granted_to: str) -> None:
        self._logger.info(
            "all_products_listed",
            count=count,
            granted_to=granted_to,
            **self._get_context_kwargs(),
        )

    def duplicate_sku(self, sku: str) -> None:
        self._logger.warning(
            "duplicate_sku",
            sku=sku,
            **self._get_context_kwargs(),
        )

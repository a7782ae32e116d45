"""Domain probe for tenant directory lookups and its cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantDirectoryProbe(Protocol):
    """Domain probe for tenant directory operations."""

    def tenant_looked_up(self, tenant_id: str, reason: str) -> None:
        """Record the outcome of a lookup against storage."""
        ...

    def cache_hit(self, tenant_id: str, valid: bool) -> None:
        """Record that a lookup was answered from the cache."""
        ...

    def cache_miss(self, tenant_id: str) -> None:
        """Record that a lookup had to go to the underlying directory."""
        ...

    def cache_invalidated(self, tenant_id: str) -> None:
        """Record that a tenant's cache entry was dropped."""
        ...

    def cache_cleared(self) -> None:
        """Record that the whole cache was dropped."""
        ...

    def stale_population_skipped(self, tenant_id: str) -> None:
        """Record that a lookup result was not cached because of a concurrent invalidation."""
        ...

    def entry_expired(self, tenant_id: str) -> None:
        """Record that an expired entry was dropped on read."""
        ...

    def with_context(self, context: ObservationContext) -> TenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantDirectoryProbe:
    """Default implementation of TenantDirectoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantDirectoryProbe(logger=self._logger, context=context)

    def tenant_looked_up(self, tenant_id: str, reason: str) -> None:
        self._logger.debug(
            "tenant_directory_lookup",
            tenant_id=tenant_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def cache_hit(self, tenant_id: str, valid: bool) -> None:
        self._logger.debug(
            "tenant_directory_cache_hit",
            tenant_id=tenant_id,
            valid=valid,
            **self._get_context_kwargs(),
        )

    def cache_miss(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_directory_cache_miss",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def cache_invalidated(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_directory_cache_invalidated",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def cache_cleared(self) -> None:
        self._logger.info("tenant_directory_cache_cleared", **self._get_context_kwargs())

    def stale_population_skipped(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_directory_stale_population_skipped",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def entry_expired(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_directory_entry_expired",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

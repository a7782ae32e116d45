"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of tenant resolution: which signal produced a
tenant, rejected candidates, requests let through without a tenant, and
lifecycle defects.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(self, tenant_id: str, source: str) -> None:
        """Record that a tenant context was resolved."""
        ...

    def tenant_signal_missing(self, strategy: str) -> None:
        """Record that no tenant signal was present under the strict policy."""
        ...

    def unresolved_context_allowed(self, strategy: str) -> None:
        """Record that the lenient policy let a request through without a tenant."""
        ...

    def invalid_tenant(self, candidate: str, reason: str) -> None:
        """Record that a tenant candidate was rejected by the directory."""
        ...

    def tenant_signal_rejected(self, strategy: str, reason: str) -> None:
        """Record that a tenant signal could not be verified."""
        ...

    def directory_lookup_failed(self, candidate: str, error: Exception) -> None:
        """Record that the tenant directory could not be reached."""
        ...

    def resolution_cancelled(self, candidate: str) -> None:
        """Record that resolution was cancelled before completing."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved(self, tenant_id: str, source: str) -> None:
        """Record that a tenant context was resolved."""
        self._logger.debug(
            "tenant_context_resolved",
            tenant_id=tenant_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def tenant_signal_missing(self, strategy: str) -> None:
        """Record that no tenant signal was present under the strict policy."""
        self._logger.warning(
            "tenant_context_signal_missing",
            strategy=strategy,
            **self._get_context_kwargs(),
        )

    def unresolved_context_allowed(self, strategy: str) -> None:
        """Record that the lenient policy let a request through without a tenant."""
        self._logger.warning(
            "tenant_context_unresolved_allowed",
            strategy=strategy,
            message="Lenient tenant policy: request continues without tenant isolation",
            **self._get_context_kwargs(),
        )

    def invalid_tenant(self, candidate: str, reason: str) -> None:
        """Record that a tenant candidate was rejected by the directory."""
        self._logger.warning(
            "tenant_context_invalid_tenant",
            candidate=candidate,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def tenant_signal_rejected(self, strategy: str, reason: str) -> None:
        """Record that a tenant signal could not be verified."""
        self._logger.warning(
            "tenant_context_signal_rejected",
            strategy=strategy,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def directory_lookup_failed(self, candidate: str, error: Exception) -> None:
        """Record that the tenant directory could not be reached."""
        self._logger.error(
            "tenant_context_directory_lookup_failed",
            candidate=candidate,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def resolution_cancelled(self, candidate: str) -> None:
        """Record that resolution was cancelled before completing."""
        self._logger.info(
            "tenant_context_resolution_cancelled",
            candidate=candidate,
            **self._get_context_kwargs(),
        )

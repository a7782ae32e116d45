"""Domain probe for tenant-isolated data access.

Records filter application, write stamping, refused operations, degraded
null-tenant reads, and every cross-tenant bypass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DataAccessProbe(Protocol):
    """Domain probe for DataAccessSession operations."""

    def session_opened(self, tenant_id: str | None) -> None:
        """Record that a session snapshotted its tenant."""
        ...

    def tenant_filter_applied(self, entity_type: str, tenant_id: str) -> None:
        """Record that a tenant filter was composed into a read."""
        ...

    def null_tenant_read(self, entity_type: str) -> None:
        """Record a deliberate degraded read matching rows without a tenant."""
        ...

    def tenant_required(self, operation: str, entity_type: str) -> None:
        """Record that an operation was refused for lack of a tenant."""
        ...

    def entities_stamped(self, tenant_id: str, count: int) -> None:
        """Record that pending entities were stamped with the session tenant."""
        ...

    def forged_tenant_overwritten(
        self, entity_type: str, supplied: str, tenant_id: str
    ) -> None:
        """Record that a caller-supplied tenant value was replaced."""
        ...

    def cross_tenant_attempt(
        self, operation: str, entity_type: str, tenant_id: str | None
    ) -> None:
        """Record that an operation tried to leave the session's tenant."""
        ...

    def filter_bypassed(self, entity_type: str, granted_to: str, reason: str) -> None:
        """Record a privileged cross-tenant read."""
        ...

    def unit_of_work_rolled_back(self, reason: str) -> None:
        """Record that pending changes were discarded."""
        ...

    def with_context(self, context: ObservationContext) -> DataAccessProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDataAccessProbe:
    """Default implementation of DataAccessProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultDataAccessProbe:
        """Create a new probe with observation context bound."""
        return DefaultDataAccessProbe(logger=self._logger, context=context)

    def session_opened(self, tenant_id: str | None) -> None:
        self._logger.debug(
            "data_access_session_opened",
            tenant_snapshot=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_filter_applied(self, entity_type: str, tenant_id: str) -> None:
        self._logger.debug(
            "data_access_tenant_filter_applied",
            entity_type=entity_type,
            tenant_snapshot=tenant_id,
            **self._get_context_kwargs(),
        )

    def null_tenant_read(self, entity_type: str) -> None:
        self._logger.warning(
            "data_access_null_tenant_read",
            entity_type=entity_type,
            message="Unresolved tenant: read restricted to rows without a tenant",
            **self._get_context_kwargs(),
        )

    def tenant_required(self, operation: str, entity_type: str) -> None:
        self._logger.warning(
            "data_access_tenant_required",
            operation=operation,
            entity_type=entity_type,
            **self._get_context_kwargs(),
        )

    def entities_stamped(self, tenant_id: str, count: int) -> None:
        self._logger.debug(
            "data_access_entities_stamped",
            tenant_snapshot=tenant_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def forged_tenant_overwritten(
        self, entity_type: str, supplied: str, tenant_id: str
    ) -> None:
        self._logger.warning(
            "data_access_forged_tenant_overwritten",
            entity_type=entity_type,
            supplied_tenant=supplied,
            tenant_snapshot=tenant_id,
            **self._get_context_kwargs(),
        )

    def cross_tenant_attempt(
        self, operation: str, entity_type: str, tenant_id: str | None
    ) -> None:
        self._logger.error(
            "data_access_cross_tenant_attempt",
            operation=operation,
            entity_type=entity_type,
            tenant_snapshot=tenant_id,
            **self._get_context_kwargs(),
        )

    def filter_bypassed(self, entity_type: str, granted_to: str, reason: str) -> None:
        self._logger.warning(
            "data_access_filter_bypassed",
            entity_type=entity_type,
            granted_to=granted_to,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def unit_of_work_rolled_back(self, reason: str) -> None:
        self._logger.info(
            "data_access_unit_of_work_rolled_back",
            reason=reason,
            **self._get_context_kwargs(),
        )

"""Domain probe for tenant administration.

Tenant administration matters to isolation in two ways: a change to a
tenant's ``active`` flag decides whether new requests for it resolve, and
the directory cache has to be told about it. Both are logged here, together
with the id provenance of new tenants and which uniqueness rule a rejected
create broke.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext

InvalidationTrigger = Literal["created", "activated", "deactivated"]


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, name: str, id_chosen: bool) -> None:
        """Record a new tenant and whether its id was chosen or generated."""
        ...

    def duplicate_tenant(self, name: str, conflict: Literal["name", "id"]) -> None:
        """Record that a create collided with an existing tenant."""
        ...

    def tenant_activation_changed(self, tenant_id: str, active: bool) -> None:
        """Record that new requests for a tenant start or stop resolving."""
        ...

    def tenant_activation_unchanged(self, tenant_id: str, active: bool) -> None:
        """Record a request to set the active flag to its current value."""
        ...

    def directory_entry_invalidated(
        self, tenant_id: str, trigger: InvalidationTrigger
    ) -> None:
        """Record that the directory cache entry was dropped after commit."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def tenants_listed(self, count: int, inactive: int) -> None:
        """Record a listing and how many listed tenants are inactive."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, name: str, id_chosen: bool) -> None:
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            name=name,
            id_source="chosen" if id_chosen else "generated",
            **self._get_context_kwargs(),
        )

    def duplicate_tenant(self, name: str, conflict: Literal["name", "id"]) -> None:
        self._logger.warning(
            "tenant_create_conflict",
            name=name,
            conflict=conflict,
            **self._get_context_kwargs(),
        )

    def tenant_activation_changed(self, tenant_id: str, active: bool) -> None:
        if active:
            self._logger.info(
                "tenant_activated",
                tenant_id=tenant_id,
                **self._get_context_kwargs(),
            )
            return
        # In-flight sessions keep their snapshot; only new requests are refused.
        self._logger.warning(
            "tenant_deactivated",
            tenant_id=tenant_id,
            message="New requests for this tenant will be rejected with INVALID_TENANT",
            **self._get_context_kwargs(),
        )

    def tenant_activation_unchanged(self, tenant_id: str, active: bool) -> None:
        self._logger.info(
            "tenant_activation_unchanged",
            tenant_id=tenant_id,
            active=active,
            **self._get_context_kwargs(),
        )

    def directory_entry_invalidated(
        self, tenant_id: str, trigger: InvalidationTrigger
    ) -> None:
        self._logger.debug(
            "tenant_directory_entry_invalidated",
            tenant_id=tenant_id,
            trigger=trigger,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_not_found",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int, inactive: int) -> None:
        self._logger.debug(
            "tenants_listed",
            count=count,
            inactive=inactive,
            **self._get_context_kwargs(),
        )

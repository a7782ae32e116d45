"""Pre-persist interceptors for tenant-owned entities.

A ``DataAccessSession`` runs its interceptors, in list order, over the
pending changes of a unit of work immediately before committing. Any
interceptor may raise to abort the whole unit of work.

The default chain is:

1. ``TenantOwnershipValidator`` - modified and deleted tenant-owned
   entities must already belong to the session's tenant.
2. ``TenantStampingInterceptor`` - added and modified tenant-owned entities
   get the session's tenant written over whatever the caller set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from sqlalchemy.orm.attributes import get_history

from infrastructure.database.data_access.observability import (
    DataAccessProbe,
    DefaultDataAccessProbe,
)
from infrastructure.database.data_access.registry import TenantOwnedRegistry
from shared_kernel.middleware.exceptions import (
    CrossTenantAttemptError,
    TenantRequiredError,
)


@dataclass(frozen=True)
class PendingChanges:
    """Entities tracked by a unit of work, grouped by state."""

    added: tuple[Any, ...] = ()
    modified: tuple[Any, ...] = ()
    deleted: tuple[Any, ...] = ()


class PrePersistInterceptor(Protocol):
    """Hook invoked with pending changes before they are persisted."""

    def before_persist(self, changes: PendingChanges, tenant_id: str | None) -> None:
        """Inspect or adjust pending changes.

        Args:
            changes: Pending entities of the unit of work.
            tenant_id: The session's tenant snapshot, None when unresolved.

        Raises:
            TenancyError: To abort the unit of work.
        """
        ...


def persisted_tenant_id(entity: Any, attribute: str) -> Any:
    """Tenant value as last loaded from storage, ignoring in-memory edits."""
    history = get_history(entity, attribute)
    if history.deleted:
        return history.deleted[0]
    if history.unchanged:
        return history.unchanged[0]
    return None


class TenantOwnershipValidator:
    """Refuses to modify or delete rows owned by another tenant.

    Rows reached through a filtered session always pass. The check catches
    entities that entered the unit of work some other way, such as objects
    read through ``bypass_filter`` and then edited.
    """

    def __init__(
        self,
        registry: TenantOwnedRegistry,
        probe: DataAccessProbe | None = None,
        persisted_tenant_of: Callable[[Any, str], Any] = persisted_tenant_id,
    ) -> None:
        self._registry = registry
        self._probe = probe or DefaultDataAccessProbe()
        self._persisted_tenant_of = persisted_tenant_of

    def before_persist(self, changes: PendingChanges, tenant_id: str | None) -> None:
        for operation, entities in (
            ("modify", changes.modified),
            ("delete", changes.deleted),
        ):
            for entity in entities:
                entity_type = type(entity)
                if not self._registry.is_tenant_owned(entity_type):
                    continue

                if tenant_id is None:
                    self._probe.tenant_required(operation, entity_type.__name__)
                    raise TenantRequiredError(
                        f"Cannot {operation} {entity_type.__name__} without a resolved tenant"
                    )

                owner = self._persisted_tenant_of(
                    entity, self._registry.tenant_attribute(entity_type)
                )
                if owner != tenant_id:
                    self._probe.cross_tenant_attempt(
                        operation, entity_type.__name__, tenant_id
                    )
                    raise CrossTenantAttemptError(
                        f"Cannot {operation} {entity_type.__name__} owned by another tenant"
                    )


class TenantStampingInterceptor:
    """Writes the session's tenant onto added and modified tenant-owned entities.

    The value is overwritten unconditionally so a caller cannot forge a write
    into another tenant by setting the attribute itself.
    """

    def __init__(
        self,
        registry: TenantOwnedRegistry,
        probe: DataAccessProbe | None = None,
    ) -> None:
        self._registry = registry
        self._probe = probe or DefaultDataAccessProbe()

    def before_persist(self, changes: PendingChanges, tenant_id: str | None) -> None:
        owned = [
            entity
            for entity in (*changes.added, *changes.modified)
            if self._registry.is_tenant_owned(type(entity))
        ]
        if not owned:
            return

        if tenant_id is None:
            entity_name = type(owned[0]).__name__
            self._probe.tenant_required("write", entity_name)
            raise TenantRequiredError(
                f"Cannot write {entity_name} without a resolved tenant"
            )

        for entity in owned:
            attribute = self._registry.tenant_attribute(type(entity))
            supplied = getattr(entity, attribute, None)
            if supplied is not None and supplied != tenant_id:
                self._probe.forged_tenant_overwritten(
                    type(entity).__name__, str(supplied), tenant_id
                )
            setattr(entity, attribute, tenant_id)

        self._probe.entities_stamped(tenant_id, len(owned))


def default_interceptors(
    registry: TenantOwnedRegistry,
    probe: DataAccessProbe | None = None,
) -> list[PrePersistInterceptor]:
    """The standard interceptor chain, validation before stamping."""
    return [
        TenantOwnershipValidator(registry, probe=probe),
        TenantStampingInterceptor(registry, probe=probe),
    ]

"""Tenant-isolated data access session.

``DataAccessSession`` is the only persistence surface business code uses.
It wraps one SQLAlchemy ``AsyncSession`` for one request (or one logical
unit of work) and:

- snapshots the tenant id when it is constructed and never re-reads it,
- composes ``tenant_id == <snapshot>`` into every read of a tenant-owned
  type, including primary-key lookups,
- runs pre-persist interceptors (ownership validation, tenant stamping)
  over pending changes before committing,
- refuses tenant-owned work without a tenant, with a named error, instead of
  returning empty or unfiltered results.

Pending additions are not flushed by reads. Call ``save_changes()`` before
expecting to read back rows added through the same session.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Iterable, Sequence, TypeVar

from sqlalchemy import ColumnElement, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.data_access.interceptors import (
    PendingChanges,
    PrePersistInterceptor,
    default_interceptors,
)
from infrastructure.database.data_access.observability import (
    DataAccessProbe,
    DefaultDataAccessProbe,
)
from infrastructure.database.data_access.privileges import PrivilegedAccess
from infrastructure.database.data_access.registry import (
    TenantOwnedRegistry,
    tenant_owned_registry,
)
from infrastructure.database.exceptions import TransactionError
from shared_kernel.middleware.exceptions import (
    CrossTenantAttemptError,
    TenancyError,
    TenantRequiredError,
)
from shared_kernel.middleware.tenant_context import RequestTenantScope, TenantContext

E = TypeVar("E")


class UnresolvedReadPolicy(StrEnum):
    """What a tenant-owned read does when the session has no tenant.

    REFUSE raises ``TenantRequiredError``. MATCH_NULL restricts the read to
    rows whose tenant column IS NULL; it exists only for legacy data and is
    logged on every use.
    """

    REFUSE = "refuse"
    MATCH_NULL = "match_null"


class DataAccessSession:
    """Per-request persistence handle enforcing tenant isolation.

    Owned exclusively by the code path that built it; never shared between
    requests.
    """

    def __init__(
        self,
        session: AsyncSession,
        context: TenantContext,
        *,
        registry: TenantOwnedRegistry | None = None,
        interceptors: Iterable[PrePersistInterceptor] | None = None,
        unresolved_read_policy: UnresolvedReadPolicy | str = UnresolvedReadPolicy.REFUSE,
        probe: DataAccessProbe | None = None,
    ) -> None:
        """Snapshot the tenant and prepare the interceptor chain.

        Args:
            session: The request's SQLAlchemy session. Must not be used
                directly by anyone else while this handle is alive.
            context: Tenant context to snapshot. Later changes to where the
                context came from do not affect this session.
            registry: Registry deciding which types are tenant-owned.
            interceptors: Pre-persist chain; defaults to ownership validation
                followed by stamping.
            unresolved_read_policy: Behaviour of tenant-owned reads when the
                snapshot is empty.
            probe: Optional domain probe for observability.
        """
        self._session = session
        self._tenant_snapshot: str | None = context.tenant_id
        self._registry = registry or tenant_owned_registry
        self._probe = probe or DefaultDataAccessProbe()
        self._interceptors: list[PrePersistInterceptor] = (
            list(interceptors)
            if interceptors is not None
            else default_interceptors(self._registry, probe=self._probe)
        )
        self._unresolved_read_policy = UnresolvedReadPolicy(unresolved_read_policy)
        self._probe.session_opened(self._tenant_snapshot)

    @classmethod
    def for_request(
        cls,
        scope: RequestTenantScope,
        session: AsyncSession,
        **kwargs: Any,
    ) -> DataAccessSession:
        """Build a session for a request whose tenant resolution has completed.

        Raises:
            OrderingViolationError: If resolution has not completed.
        """
        context = scope.require_settled("open data access session")
        return cls(session, context, **kwargs)

    @property
    def tenant_snapshot(self) -> str | None:
        """The tenant id captured at construction."""
        return self._tenant_snapshot

    def _tenant_criteria(
        self, entity_type: type, operation: str
    ) -> list[ColumnElement[bool]]:
        if not self._registry.is_tenant_owned(entity_type):
            return []

        column = self._registry.tenant_column(entity_type)
        if self._tenant_snapshot is not None:
            self._probe.tenant_filter_applied(
                entity_type.__name__, self._tenant_snapshot
            )
            return [column == self._tenant_snapshot]

        if self._unresolved_read_policy is UnresolvedReadPolicy.MATCH_NULL:
            self._probe.null_tenant_read(entity_type.__name__)
            return [column.is_(None)]

        self._probe.tenant_required(operation, entity_type.__name__)
        raise TenantRequiredError(
            f"Cannot {operation} {entity_type.__name__} without a resolved tenant"
        )

    async def _select(
        self,
        entity_type: type[E],
        criteria: Sequence[Any],
        order_by: Sequence[Any],
        limit: int | None,
    ) -> list[E]:
        stmt = select(entity_type).where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)

        # Pending entities are only persisted through save_changes().
        with self._session.no_autoflush:
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def read(
        self,
        entity_type: type[E],
        *predicates: Any,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[E]:
        """Select entities matching ``predicates`` within the session's tenant.

        Args:
            entity_type: Mapped model class.
            *predicates: SQLAlchemy boolean expressions, ANDed together.
            order_by: Ordering expressions.
            limit: Maximum number of rows.

        Raises:
            TenantRequiredError: Tenant-owned type, no tenant, REFUSE policy.
        """
        criteria = [*predicates, *self._tenant_criteria(entity_type, "read")]
        return await self._select(entity_type, criteria, order_by, limit)

    async def direct_lookup(self, entity_type: type[E], primary_key: Any) -> E | None:
        """Fetch one entity by primary key within the session's tenant.

        Goes through the same filtered SELECT as ``read``. The identity-map
        shortcut of ``AsyncSession.get`` is never used because it can return
        an already-loaded row without applying the tenant filter.

        Args:
            entity_type: Mapped model class.
            primary_key: Scalar key, or a tuple for composite keys.

        Returns:
            The entity, or None if it does not exist for this tenant.
        """
        columns = sa_inspect(entity_type).primary_key
        values = primary_key if isinstance(primary_key, tuple) else (primary_key,)
        if len(values) != len(columns):
            raise ValueError(
                f"{entity_type.__name__} has {len(columns)} primary key column(s), "
                f"got {len(values)} value(s)"
            )

        predicates = [column == value for column, value in zip(columns, values)]
        rows = await self.read(entity_type, *predicates)
        return rows[0] if rows else None

    async def bypass_filter(
        self,
        entity_type: type[E],
        *predicates: Any,
        capability: PrivilegedAccess | None = None,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[E]:
        """Read across all tenants. Administrative code paths only.

        Args:
            entity_type: Mapped model class.
            *predicates: SQLAlchemy boolean expressions, ANDed together.
            capability: Proof of an administrative check.
            order_by: Ordering expressions.
            limit: Maximum number of rows.

        Raises:
            CrossTenantAttemptError: If no privileged capability is given.
        """
        if not isinstance(capability, PrivilegedAccess):
            self._probe.cross_tenant_attempt(
                "bypass_filter", entity_type.__name__, self._tenant_snapshot
            )
            raise CrossTenantAttemptError(
                f"Reading {entity_type.__name__} across tenants requires privileged access"
            )

        self._probe.filter_bypassed(
            entity_type.__name__, capability.granted_to, capability.reason
        )
        return await self._select(entity_type, list(predicates), order_by, limit)

    def add(self, entity: Any) -> None:
        """Track a new entity. Persisted by ``save_changes()``."""
        self._session.add(entity)

    async def delete(self, entity: Any) -> None:
        """Mark an entity for deletion. Persisted by ``save_changes()``."""
        await self._session.delete(entity)

    async def write(self, *entities: Any) -> None:
        """Track the given entities and persist the unit of work."""
        for entity in entities:
            self.add(entity)
        await self.save_changes()

    def _pending_changes(self) -> PendingChanges:
        return PendingChanges(
            added=tuple(self._session.new),
            modified=tuple(
                entity
                for entity in self._session.dirty
                if self._session.is_modified(entity)
            ),
            deleted=tuple(self._session.deleted),
        )

    async def save_changes(self) -> None:
        """Run the pre-persist interceptors and commit.

        Raises:
            TenantRequiredError: Tenant-owned changes without a tenant.
            CrossTenantAttemptError: Changes to another tenant's rows.
            TransactionError: The commit failed in storage.

        On any of these the whole unit of work is rolled back.
        """
        changes = self._pending_changes()
        try:
            for interceptor in self._interceptors:
                interceptor.before_persist(changes, self._tenant_snapshot)
            await self._session.commit()
        except TenancyError as e:
            await self._session.rollback()
            self._probe.unit_of_work_rolled_back(reason=e.code)
            raise
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._probe.unit_of_work_rolled_back(reason=type(e).__name__)
            raise TransactionError(f"Failed to persist changes: {e}") from e

    async def rollback(self) -> None:
        """Discard pending changes."""
        await self._session.rollback()
        self._probe.unit_of_work_rolled_back(reason="requested")

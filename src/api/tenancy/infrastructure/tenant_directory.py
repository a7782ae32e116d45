"""Tenant directory implementations.

``RepositoryTenantDirectory`` answers validation questions from storage,
opening its own short-lived session per lookup so it never joins a
request's unit of work.

``CachedTenantDirectory`` fronts any directory with a TTL cache shared by
all concurrent requests of the process.

Staleness: a tenant deactivated in storage keeps validating from a cached
positive entry until that entry expires (``ttl`` seconds at most), unless
``invalidate()`` is called for it. The administrative deactivation route
calls ``invalidate()`` on the process it runs in; other processes observe
the change within the TTL.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.domain.value_objects import TenantId
from tenancy.infrastructure.observability import (
    DefaultTenantDirectoryProbe,
    TenantDirectoryProbe,
)
from tenancy.infrastructure.tenant_repository import TenantRepository
from tenancy.ports.repositories import TenantDirectory, TenantValidation

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_NEGATIVE_TTL_SECONDS = 30.0
DEFAULT_MAX_ENTRIES = 10_000


class RepositoryTenantDirectory:
    """Validates tenants against the tenants table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: TenantDirectoryProbe | None = None,
    ) -> None:
        """Initialize the directory.

        Args:
            session_factory: Factory for lookup sessions
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultTenantDirectoryProbe()

    async def validate(self, tenant_id: str) -> TenantValidation:
        """Check that the tenant exists and is active.

        Malformed identifiers are rejected without a storage round trip.
        Storage errors propagate to the caller.
        """
        if not TenantId.is_well_formed(tenant_id):
            self._probe.tenant_looked_up(tenant_id, "malformed")
            return TenantValidation.rejected(tenant_id, "malformed")

        async with self._session_factory() as session:
            tenant = await TenantRepository(session).get_by_id(TenantId(value=tenant_id))

        if tenant is None:
            validation = TenantValidation.rejected(tenant_id, "not_found")
        elif not tenant.active:
            validation = TenantValidation.rejected(tenant_id, "inactive")
        else:
            validation = TenantValidation.active(tenant_id)

        self._probe.tenant_looked_up(tenant_id, validation.reason)
        return validation

    async def invalidate(self, tenant_id: str) -> None:
        """Nothing is cached at this level."""
        return None


@dataclass(frozen=True)
class _CacheEntry:
    validation: TenantValidation
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class CachedTenantDirectory:
    """TTL cache in front of another TenantDirectory.

    Fresh hits are lock-free dictionary lookups. An expired entry is dropped
    by the read that finds it. Removal, population and invalidation are
    serialized by a lock, and every key carries an invalidation generation:
    a lookup that started before an ``invalidate()`` does not write its
    (possibly stale) result back.
    """

    def __init__(
        self,
        inner: TenantDirectory,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        negative_ttl_seconds: float = DEFAULT_NEGATIVE_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
        probe: TenantDirectoryProbe | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            inner: Directory consulted on a miss
            ttl_seconds: Lifetime of positive entries; 0 disables them
            negative_ttl_seconds: Lifetime of negative entries; 0 disables them
            max_entries: Upper bound on cached tenants
            clock: Monotonic time source (injectable for tests)
            probe: Optional domain probe for observability
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._inner = inner
        self._ttl = ttl_seconds
        self._negative_ttl = negative_ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._probe = probe or DefaultTenantDirectoryProbe()

        self._entries: dict[str, _CacheEntry] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._lock = asyncio.Lock()

    def _stamp(self, tenant_id: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(tenant_id, 0)

    async def validate(self, tenant_id: str) -> TenantValidation:
        entry = self._entries.get(tenant_id)
        if entry is not None:
            if not entry.is_expired(self._clock()):
                self._probe.cache_hit(tenant_id, entry.validation.valid)
                return entry.validation
            await self._drop_expired(tenant_id, entry)

        self._probe.cache_miss(tenant_id)
        stamp = self._stamp(tenant_id)
        validation = await self._inner.validate(tenant_id)
        await self._populate(tenant_id, validation, stamp)
        return validation

    async def _drop_expired(self, tenant_id: str, entry: _CacheEntry) -> None:
        async with self._lock:
            # Another lookup may have replaced the entry meanwhile.
            if self._entries.get(tenant_id) is entry:
                del self._entries[tenant_id]
                self._probe.entry_expired(tenant_id)

    async def _populate(
        self,
        tenant_id: str,
        validation: TenantValidation,
        stamp: tuple[int, int],
    ) -> None:
        # Junk identifiers are never cached.
        if validation.reason == "malformed":
            return
        ttl = self._ttl if validation.valid else self._negative_ttl
        if ttl <= 0:
            return

        async with self._lock:
            if self._stamp(tenant_id) != stamp:
                self._probe.stale_population_skipped(tenant_id)
                return
            if tenant_id not in self._entries and len(self._entries) >= self._max_entries:
                self._evict()
            self._entries[tenant_id] = _CacheEntry(
                validation=validation,
                expires_at=self._clock() + ttl,
            )

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, e in self._entries.items() if e.is_expired(now)]:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            # Oldest insertion first
            del self._entries[next(iter(self._entries))]

    async def invalidate(self, tenant_id: str) -> None:
        """Drop the entry for a tenant and fence off in-flight lookups."""
        async with self._lock:
            self._generations[tenant_id] = self._generations.get(tenant_id, 0) + 1
            self._entries.pop(tenant_id, None)
        self._probe.cache_invalidated(tenant_id)

    async def size(self) -> int:
        """Number of cached entries, expired ones included until next touched."""
        return len(self._entries)

    async def clear(self) -> None:
        """Drop every entry and fence off all in-flight lookups."""
        async with self._lock:
            self._epoch += 1
            self._entries.clear()
            self._generations.clear()
        self._probe.cache_cleared()

"""Behavioural tests for DataAccessSession against SQLite.

Covers the isolation guarantees of the session:
- reads and primary-key lookups only return the snapshot tenant's rows
- writes are stamped with the snapshot tenant, overriding forged values
- an unresolved session fails closed (or matches NULL when configured)
- cross-tenant reads need a privileged capability
- cross-tenant modifications abort the whole unit of work
- the snapshot never follows later changes of the request's tenant
"""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import String, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from catalog.infrastructure.models import ProductModel
from infrastructure.database.data_access import (
    DataAccessProbe,
    DataAccessSession,
    PrivilegedAccess,
    TenantOwnedRegistry,
    UnresolvedReadPolicy,
)
from infrastructure.database.exceptions import TransactionError
from shared_kernel.middleware.exceptions import (
    CrossTenantAttemptError,
    OrderingViolationError,
    TenantRequiredError,
)
from shared_kernel.middleware.tenant_context import RequestTenantScope, TenantContext
from tenancy.infrastructure.models import TenantModel


def _context(tenant_id: str | None) -> TenantContext:
    if tenant_id is None:
        return TenantContext.unresolved()
    return TenantContext(tenant_id=tenant_id, source="header")


def _product(product_id: str, sku: str, tenant_id: str | None = None) -> ProductModel:
    return ProductModel(id=product_id, name=f"Product {sku}", sku=sku, tenant_id=tenant_id)


@pytest_asyncio.fixture
async def products(session_factory, seeded_tenants) -> None:
    """Two products for t1 and one for t2, written through tenant sessions."""
    async with session_factory() as session:
        await DataAccessSession(session, _context("t1")).write(
            _product("P1", "SKU-1"), _product("P2", "SKU-2")
        )
    async with session_factory() as session:
        await DataAccessSession(session, _context("t2")).write(_product("P3", "SKU-1"))


async def _raw_products(session_factory) -> list[ProductModel]:
    async with session_factory() as session:
        result = await session.execute(select(ProductModel).order_by(ProductModel.id))
        return list(result.scalars().all())


class TestReadIsolation:
    """Reads of tenant-owned types are filtered by the snapshot."""

    @pytest.mark.asyncio
    async def test_read_returns_only_own_rows(self, session_factory, products):
        async with session_factory() as session:
            rows = await DataAccessSession(session, _context("t1")).read(
                ProductModel, order_by=(ProductModel.id,)
            )

        assert [p.id for p in rows] == ["P1", "P2"]
        assert {p.tenant_id for p in rows} == {"t1"}

    @pytest.mark.asyncio
    async def test_predicate_is_combined_with_tenant_filter(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t2"))
            rows = await data.read(ProductModel, ProductModel.sku == "SKU-1")

        assert [p.id for p in rows] == ["P3"]

    @pytest.mark.asyncio
    async def test_limit(self, session_factory, products):
        async with session_factory() as session:
            rows = await DataAccessSession(session, _context("t1")).read(
                ProductModel, order_by=(ProductModel.id,), limit=1
            )

        assert [p.id for p in rows] == ["P1"]

    @pytest.mark.asyncio
    async def test_types_that_are_not_tenant_owned_are_not_filtered(
        self, session_factory, products
    ):
        async with session_factory() as session:
            tenants = await DataAccessSession(session, _context("t1")).read(TenantModel)

        assert {t.id for t in tenants} == {"t1", "t2", "t3"}

    @pytest.mark.asyncio
    async def test_filter_application_is_logged(self, session_factory, products):
        probe = MagicMock(spec=DataAccessProbe)

        async with session_factory() as session:
            await DataAccessSession(session, _context("t1"), probe=probe).read(ProductModel)

        probe.tenant_filter_applied.assert_called_with("ProductModel", "t1")


class TestDirectLookup:
    """Primary-key lookups take the same filtered path as reads."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tenant_id", ["t1", "t2"])
    @pytest.mark.parametrize("product_id", ["P1", "P2", "P3", "missing"])
    async def test_direct_lookup_matches_read(
        self, session_factory, products, tenant_id, product_id
    ):
        async with session_factory() as session:
            data = DataAccessSession(session, _context(tenant_id))
            by_key = await data.direct_lookup(ProductModel, product_id)
            by_read = await data.read(ProductModel, ProductModel.id == product_id)

        assert ([by_key] if by_key else []) == by_read

    @pytest.mark.asyncio
    async def test_other_tenants_row_is_invisible_even_if_already_loaded(
        self, session_factory, products
    ):
        """A row in the identity map must not leak through a key lookup."""
        async with session_factory() as session:
            loaded = await session.get(ProductModel, "P3")
            assert loaded is not None

            data = DataAccessSession(session, _context("t1"))
            assert await data.direct_lookup(ProductModel, "P3") is None

    @pytest.mark.asyncio
    async def test_wrong_key_arity_raises(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))

            with pytest.raises(ValueError):
                await data.direct_lookup(ProductModel, ("P1", "extra"))


class TestWriteStamping:
    """Writes are stamped with the snapshot tenant."""

    @pytest.mark.asyncio
    async def test_create_without_tenant_is_stamped(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            await DataAccessSession(session, _context("t1")).write(_product("N1", "NEW"))

        [row] = await _raw_products(session_factory)
        assert row.tenant_id == "t1"

    @pytest.mark.asyncio
    async def test_forged_tenant_is_overwritten(self, session_factory, seeded_tenants):
        probe = MagicMock(spec=DataAccessProbe)

        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"), probe=probe)
            await data.write(_product("N1", "NEW", tenant_id="t2"))

        [row] = await _raw_products(session_factory)
        assert row.tenant_id == "t1"
        probe.forged_tenant_overwritten.assert_called_once_with("ProductModel", "t2", "t1")

    @pytest.mark.asyncio
    async def test_explicit_and_implicit_tenant_persist_identically(
        self, session_factory, seeded_tenants
    ):
        async with session_factory() as session:
            await DataAccessSession(session, _context("t1")).write(
                _product("N1", "A"), _product("N2", "B", tenant_id="t2")
            )

        rows = await _raw_products(session_factory)
        assert [r.tenant_id for r in rows] == ["t1", "t1"]

    @pytest.mark.asyncio
    async def test_modifying_tenant_column_is_reverted_by_stamping(
        self, session_factory, products
    ):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))
            product = await data.direct_lookup(ProductModel, "P1")
            assert product is not None
            product.tenant_id = "t2"
            product.name = "Renamed"
            await data.save_changes()

        rows = {r.id: r for r in await _raw_products(session_factory)}
        assert rows["P1"].tenant_id == "t1"
        assert rows["P1"].name == "Renamed"

    @pytest.mark.asyncio
    async def test_reads_do_not_flush_pending_additions(self, session_factory, seeded_tenants):
        """Nothing reaches storage before the interceptors ran."""
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))
            data.add(_product("N1", "NEW", tenant_id="t2"))

            assert await data.read(ProductModel) == []

            await data.save_changes()

        [row] = await _raw_products(session_factory)
        assert row.tenant_id == "t1"

    @pytest.mark.asyncio
    async def test_delete_own_row(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))
            product = await data.direct_lookup(ProductModel, "P1")
            await data.delete(product)
            await data.save_changes()

        assert [r.id for r in await _raw_products(session_factory)] == ["P2", "P3"]


class TestFailClosed:
    """An unresolved session refuses tenant-owned work."""

    @pytest.mark.asyncio
    async def test_read_is_refused(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context(None))

            with pytest.raises(TenantRequiredError):
                await data.read(ProductModel)

    @pytest.mark.asyncio
    async def test_direct_lookup_is_refused(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context(None))

            with pytest.raises(TenantRequiredError):
                await data.direct_lookup(ProductModel, "P1")

    @pytest.mark.asyncio
    async def test_write_is_refused_and_nothing_persists(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            data = DataAccessSession(session, _context(None))

            with pytest.raises(TenantRequiredError):
                await data.write(_product("N1", "NEW", tenant_id="t1"))

        assert await _raw_products(session_factory) == []

    @pytest.mark.asyncio
    async def test_failed_unit_of_work_persists_nothing(self, session_factory, seeded_tenants):
        """Untracked rows added in the same unit of work are rolled back too."""
        async with session_factory() as session:
            data = DataAccessSession(session, _context(None))
            data.add(TenantModel(id="t9", name="Tenant Nine"))
            data.add(_product("N1", "NEW"))

            with pytest.raises(TenantRequiredError):
                await data.save_changes()

        async with session_factory() as session:
            assert await session.get(TenantModel, "t9") is None

    @pytest.mark.asyncio
    async def test_untracked_types_remain_usable(self, session_factory, seeded_tenants):
        async with session_factory() as session:
            data = DataAccessSession(session, _context(None))

            tenants = await data.read(TenantModel)

        assert len(tenants) == 3


class LegacyBase(DeclarativeBase):
    pass


class LegacyNoteModel(LegacyBase):
    """Tenant-owned table that still has rows without a tenant."""

    __tablename__ = "legacy_notes"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class TestMatchNullPolicy:
    """The opt-in degraded read of rows without a tenant."""

    @pytest_asyncio.fixture
    async def legacy_registry(self, engine, session_factory) -> TenantOwnedRegistry:
        async with engine.begin() as conn:
            await conn.run_sync(LegacyBase.metadata.create_all)
        async with session_factory() as session:
            session.add_all(
                [
                    LegacyNoteModel(id="N1", tenant_id=None),
                    LegacyNoteModel(id="N2", tenant_id="t1"),
                ]
            )
            await session.commit()

        registry = TenantOwnedRegistry()
        registry.register(LegacyNoteModel)
        return registry

    @pytest.mark.asyncio
    async def test_match_null_reads_only_rows_without_tenant(
        self, session_factory, legacy_registry
    ):
        probe = MagicMock(spec=DataAccessProbe)

        async with session_factory() as session:
            data = DataAccessSession(
                session,
                _context(None),
                registry=legacy_registry,
                unresolved_read_policy=UnresolvedReadPolicy.MATCH_NULL,
                probe=probe,
            )
            rows = await data.read(LegacyNoteModel)

        assert [r.id for r in rows] == ["N1"]
        probe.null_tenant_read.assert_called_once_with("LegacyNoteModel")

    @pytest.mark.asyncio
    async def test_match_null_still_refuses_writes(self, session_factory, legacy_registry):
        async with session_factory() as session:
            data = DataAccessSession(
                session,
                _context(None),
                registry=legacy_registry,
                unresolved_read_policy="match_null",
            )

            with pytest.raises(TenantRequiredError):
                await data.write(LegacyNoteModel(id="N3"))

    @pytest.mark.asyncio
    async def test_resolved_session_ignores_policy(self, session_factory, legacy_registry):
        async with session_factory() as session:
            data = DataAccessSession(
                session,
                _context("t1"),
                registry=legacy_registry,
                unresolved_read_policy=UnresolvedReadPolicy.MATCH_NULL,
            )
            rows = await data.read(LegacyNoteModel)

        assert [r.id for r in rows] == ["N2"]


class TestBypassFilter:
    """Cross-tenant reads for administrative code paths."""

    @pytest.mark.asyncio
    async def test_bypass_with_capability_reads_all_tenants(self, session_factory, products):
        probe = MagicMock(spec=DataAccessProbe)
        access = PrivilegedAccess.grant("ops", "audit")

        async with session_factory() as session:
            data = DataAccessSession(session, _context(None), probe=probe)
            rows = await data.bypass_filter(
                ProductModel, capability=access, order_by=(ProductModel.id,)
            )

        assert [r.id for r in rows] == ["P1", "P2", "P3"]
        probe.filter_bypassed.assert_called_once_with("ProductModel", "ops", "audit")

    @pytest.mark.asyncio
    async def test_bypass_without_capability_is_refused(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))

            with pytest.raises(CrossTenantAttemptError):
                await data.bypass_filter(ProductModel)

    @pytest.mark.asyncio
    async def test_bypass_with_look_alike_capability_is_refused(
        self, session_factory, products
    ):
        fake = MagicMock(granted_to="me", reason="trust me")

        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))

            with pytest.raises(CrossTenantAttemptError):
                await data.bypass_filter(ProductModel, capability=fake)

    @pytest.mark.asyncio
    async def test_modifying_bypassed_row_of_other_tenant_is_refused(
        self, session_factory, products
    ):
        access = PrivilegedAccess.grant("ops", "audit")

        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))
            [other] = await data.bypass_filter(
                ProductModel, ProductModel.id == "P3", capability=access
            )
            other.name = "Hijacked"

            with pytest.raises(CrossTenantAttemptError):
                await data.save_changes()

        rows = {r.id: r for r in await _raw_products(session_factory)}
        assert rows["P3"].name == "Product SKU-1"
        assert rows["P3"].tenant_id == "t2"

    @pytest.mark.asyncio
    async def test_deleting_bypassed_row_of_other_tenant_is_refused(
        self, session_factory, products
    ):
        access = PrivilegedAccess.grant("ops", "audit")

        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))
            [other] = await data.bypass_filter(
                ProductModel, ProductModel.id == "P3", capability=access
            )
            await data.delete(other)

            with pytest.raises(CrossTenantAttemptError):
                await data.save_changes()

        assert [r.id for r in await _raw_products(session_factory)] == ["P1", "P2", "P3"]

    def test_capability_requires_grantee(self):
        with pytest.raises(ValueError):
            PrivilegedAccess.grant(" ", "audit")


class TestSnapshotAndOrdering:
    """Snapshot stability and construction ordering."""

    @pytest.mark.asyncio
    async def test_snapshot_survives_tenant_deactivation(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))

            async with session_factory() as admin:
                tenant = await admin.get(TenantModel, "t1")
                tenant.active = False
                await admin.commit()

            assert data.tenant_snapshot == "t1"
            assert {p.id for p in await data.read(ProductModel)} == {"P1", "P2"}
            await data.write(_product("N1", "NEW"))

        rows = {r.id: r for r in await _raw_products(session_factory)}
        assert rows["N1"].tenant_id == "t1"

    def test_snapshot_is_copied_at_construction(self):
        scope = RequestTenantScope()
        scope.settle(_context("t1"))

        data = DataAccessSession.for_request(scope, MagicMock())

        assert data.tenant_snapshot == "t1"

    def test_for_request_refuses_unsettled_scope(self):
        with pytest.raises(OrderingViolationError):
            DataAccessSession.for_request(RequestTenantScope(), MagicMock())

    def test_unknown_read_policy_is_rejected(self):
        with pytest.raises(ValueError):
            DataAccessSession(MagicMock(), _context("t1"), unresolved_read_policy="allow_all")


class TestStorageFailures:
    """Storage errors roll back and surface as TransactionError."""

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_transaction_error(self, session_factory, products):
        async with session_factory() as session:
            data = DataAccessSession(session, _context("t1"))

            with pytest.raises(TransactionError):
                await data.write(_product("N1", "SKU-1"))

        assert [r.id for r in await _raw_products(session_factory)] == ["P1", "P2", "P3"]

    @pytest.mark.asyncio
    async def test_same_business_key_in_two_tenants(self, session_factory, products):
        """SKU-1 exists for t1 and t2 independently."""
        async with session_factory() as session:
            t1_rows = await DataAccessSession(session, _context("t1")).read(
                ProductModel, ProductModel.sku == "SKU-1"
            )
        async with session_factory() as session:
            t2_rows = await DataAccessSession(session, _context("t2")).read(
                ProductModel, ProductModel.sku == "SKU-1"
            )

        assert [p.id for p in t1_rows] == ["P1"]
        assert [p.id for p in t2_rows] == ["P3"]

"""Schema creation without migrations.

Used at startup when ``MULTITENANT_DB_CREATE_SCHEMA`` is set (local
development against SQLite) and by tests. Production schemas are managed by
Alembic. Model modules must be imported before calling so their tables are
registered on ``Base.metadata``.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.models import Base
from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe


async def create_schema(
    engine: AsyncEngine,
    probe: ConnectionProbe | None = None,
) -> None:
    """Create all registered tables that do not exist yet."""
    probe = probe or DefaultConnectionProbe()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    probe.schema_created(tables=sorted(Base.metadata.tables))

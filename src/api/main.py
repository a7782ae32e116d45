"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from ulid import ULID

import catalog.infrastructure.models  # noqa: F401
import tenancy.infrastructure.models  # noqa: F401
from catalog import presentation as catalog_presentation
from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
)
from infrastructure.database.schema import create_schema
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_database_settings,
    get_settings,
    get_tenancy_settings,
)
from infrastructure.version import __version__
from tenancy import presentation as tenancy_presentation
from tenancy.dependencies.directory import reset_tenant_directory


@asynccontextmanager
async def multitenant_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Optional schema creation (development)
    - Engine and tenant directory lifecycle (created lazily, dropped on shutdown)
    """
    settings = get_settings()
    tenancy_settings = get_tenancy_settings()
    configure_logging(debug=settings.debug)

    probe = DefaultStartupProbe()
    probe.application_starting(
        version=__version__,
        strategy=tenancy_settings.strategy,
        policy=tenancy_settings.policy,
    )
    if tenancy_settings.policy == "lenient":
        probe.lenient_policy_enabled()

    if get_database_settings().create_schema:
        await create_schema(get_engine())

    yield

    reset_tenant_directory()
    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="MultiTenant API",
    description="Tenant-isolated product catalog",
    version=__version__,
    lifespan=multitenant_lifespan,
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next):
    """Bind request id and path to every log event of the request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request.headers.get("x-request-id") or str(ULID()),
        path=request.url.path,
    )
    return await call_next(request)


tenancy_presentation.register_exception_handlers(app)

# Include bounded context routes
app.include_router(tenancy_presentation.router)
app.include_router(catalog_presentation.router)
app.include_router(catalog_presentation.admin_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}

"""Exception handlers for tenant isolation and storage errors.

Every ``TenancyError`` is answered with its own status and stable code:

    {"detail": "<message>", "code": "MISSING_TENANT"}

Storage failures answer 500 with ``STORAGE_ERROR`` and never carry driver
messages to the client.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.database.exceptions import DatabaseError
from shared_kernel.middleware.exceptions import TenancyError

logger = structlog.get_logger()


async def tenancy_error_handler(request: Request, exc: TenancyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "tenancy_error",
            code=exc.code,
            detail=exc.message,
            path=request.url.path,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "storage_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage operation failed", "code": DatabaseError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""
    app.add_exception_handler(TenancyError, tenancy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DatabaseError, storage_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

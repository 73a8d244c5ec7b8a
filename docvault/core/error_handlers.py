"""Global error handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError as DBIntegrityError

from docvault.core.exceptions import AppError

logger = logging.getLogger(__name__)


def error_body(exc: AppError) -> dict:
    """JSON body for an AppError: ``detail``, ``error_code`` and context fields."""
    content: dict = {
        "detail": exc.detail,
        "error_code": exc.error_code,
    }
    if exc.context:
        content.update(exc.context)
    return content


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app.

    AppError subclasses map to their own status code. A database
    constraint violation that slipped past service validation is
    reported as 409 CONFLICT.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "request_failed",
            extra={
                "path": request.url.path,
                "status_code": exc.status_code,
                "error_code": exc.error_code,
                "detail": exc.detail,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(DBIntegrityError)
    async def db_integrity_handler(request: Request, exc: DBIntegrityError) -> JSONResponse:
        logger.warning(
            "database_constraint_violation",
            extra={"path": request.url.path, "error": str(exc.orig)},
        )
        return JSONResponse(
            status_code=409,
            content={"detail": "Operation conflicts with existing data", "error_code": "CONFLICT"},
        )

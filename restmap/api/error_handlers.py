"""Error Handlers — global exception handlers mapping the error taxonomy to HTTP.

Invariants:
    - RestMapError → structured JSON with code, message, severity; status from STATUS_BY_CODE
    - NotFound → 404, BadRequest → 400, UnprocessableEntity → 422, Unauthorized → 401
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Status mapping lives here only: the Store and core/errors stay transport-agnostic
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from restmap.core.errors import ErrorCode, ErrorSeverity, RestMapError

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.UNPROCESSABLE_ENTITY: 422,
    ErrorCode.UNAUTHORIZED: 401,
}


def status_for(error: RestMapError) -> int:
    return STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_restmap_error_handler(app)
    _register_generic_error_handler(app)


def _register_restmap_error_handler(app: FastAPI) -> None:
    """Register taxonomy / framework error handler."""

    @app.exception_handler(RestMapError)
    async def restmap_error_handler(request: Request, exc: RestMapError):
        """Handle all RestMap store and framework errors."""
        exc.context.path = request.url.path
        http_status = status_for(exc)
        log = logger.error if http_status >= 500 else logger.info
        log(
            f"RestMapError: {exc.message}",
            extra={
                "error_code": exc.code.value,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(status_code=http_status, content=exc.to_response())


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )

"""
Global error handlers for FastAPI application
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.core.exceptions import ApiError, ConflictError
from vidtube.core.responses import error_response

logger = structlog.get_logger()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Handle domain errors raised by services and endpoints

    Args:
        request: FastAPI request object
        exc: ApiError exception

    Returns:
        JSONResponse with the error envelope
    """
    logger.warning(
        "API error occurred",
        error_type=exc.__class__.__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method
    )

    return error_response(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP exceptions (unknown routes, bad methods)"""
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return error_response(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request parsing errors

    Field errors are reported with the same 400 status as ValidationError.
    """
    logger.warning(
        "Validation error occurred",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method
    )

    formatted_errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"]
        })

    return error_response(status.HTTP_400_BAD_REQUEST, "Validation error occurred", formatted_errors)


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle database errors that escaped the services

    Unique constraint violations surface as ConflictError; values the
    database rejects (such as over-length strings) as a 400.
    """
    logger.error(
        "Database error occurred",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method
    )

    if isinstance(exc, IntegrityError):
        error_msg = str(exc.orig) if hasattr(exc, "orig") else str(exc)
        if "UNIQUE constraint failed" in error_msg or "duplicate key" in error_msg.lower():
            conflict = ConflictError()
            return error_response(conflict.status_code, conflict.message, [{"constraint_violation": "unique_constraint"}])
        return error_response(status.HTTP_400_BAD_REQUEST, "Database integrity constraint violation")

    if isinstance(exc, DataError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid value for a database field")

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong")


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.error(
        "Unexpected error occurred",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True
    )

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong")


def register_error_handlers(app):
    """
    Register all error handlers with the FastAPI application

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

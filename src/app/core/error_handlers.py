"""
Error Handlers

Global exception handlers producing the uniform error envelope:

    {"success": false, "error": {"code": ..., "message": ..., "details"?: ..., "requestId"?: ...}}

Layers, most specific first: AppError, request validation, JWT errors,
database constraint violations, Starlette HTTP errors, and a catch-all that
never leaks internals in production.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import AppError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"

HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    429: "RATE_LIMITED",
}


def build_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an error envelope. Also used by middleware, which bypasses exception handlers."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        error["requestId"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return build_error_response(
            request, exc.status_code, exc.error_code, exc.message, exc.details, exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
        return build_error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Invalid request data",
            _validation_details(exc),
        )

    @app.exception_handler(ExpiredSignatureError)
    async def expired_token_handler(request: Request, exc: ExpiredSignatureError):
        return build_error_response(
            request,
            status.HTTP_401_UNAUTHORIZED,
            "TOKEN_EXPIRED",
            "Authentication token has expired.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(JWTError)
    async def jwt_error_handler(request: Request, exc: JWTError):
        return build_error_response(
            request,
            status.HTTP_401_UNAUTHORIZED,
            "INVALID_TOKEN",
            "Invalid authentication token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        status_code, code, message = classify_integrity_error(exc)
        logger.warning(f"Integrity error on {request.url.path}: {code}")
        return build_error_response(request, status_code, code, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return build_error_response(
            request, exc.status_code, code, message, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        message = "An unexpected error occurred" if settings.is_production else str(exc)
        return build_error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message
        )


def classify_integrity_error(exc: IntegrityError) -> tuple[int, str, str]:
    """Map a database constraint violation to (status, code, message)."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig).lower()

    if sqlstate == UNIQUE_VIOLATION or "unique" in text or "duplicate key" in text:
        return 409, "DUPLICATE_ENTRY", "A record with these details already exists."
    if sqlstate == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return 400, "INVALID_REFERENCE", "Referenced record does not exist."
    if sqlstate == NOT_NULL_VIOLATION or "not-null" in text:
        return 400, "MISSING_FIELD", "A required field is missing."
    return 400, "CONSTRAINT_VIOLATION", "The request violates a data constraint."


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc), "message": error["msg"]})
    return details

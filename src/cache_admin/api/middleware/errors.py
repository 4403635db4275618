"""
Error handling for the FastAPI application.

Every error leaves the API in the same envelope:

    {
        "error": {"code": "AGENT_NOT_FOUND", "message": "...", "context": {...}},
        "request_id": "...",
        "suggested_action": "..."
    }

AppError subclasses carry their own status code; request validation errors
become 400 with field-level details; anything else becomes a 500 whose
details are hidden in production.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cache_admin.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from cache_admin.config.settings import get_settings
from cache_admin.domain.exceptions import AppError


logger = logging.getLogger(__name__)

# Validation error types with friendlier messages
VALIDATION_MESSAGES = {
    "missing": "This field is required",
    "string_type": "Must be a valid string",
    "int_type": "Must be a valid integer",
    "int_parsing": "Must be a valid integer",
    "bool_type": "Must be true or false",
    "value_error": "Invalid value",
}

HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.INSUFFICIENT_PERMISSIONS,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.INVALID_OPERATION,
}


def _get_request_id(request: Request) -> str:
    """Request ID from the request ID middleware, the header, or a fresh one."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id

    request_id = request.headers.get("x-request-id")
    if request_id:
        return request_id

    return str(uuid.uuid4())


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    is_production: bool = False,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    if is_production and status_code >= 500:
        message = "An internal error occurred. Please try again later."
        context = None

    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        details=details,
        context=context,
    )

    response_content: dict[str, Any] = {
        "error": error_detail.model_dump(mode="json", exclude_none=True),
        "request_id": request_id,
    }

    if suggested_action:
        response_content["suggested_action"] = suggested_action

    return JSONResponse(
        status_code=status_code,
        content=response_content,
        headers=headers,
    )


def _log_error(request: Request, error: Exception, status_code: int, request_id: str) -> None:
    log_context = {
        "request_id": request_id,
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_type": type(error).__name__,
    }

    if status_code >= 500:
        logger.error(f"Server error: {error}", extra=log_context, exc_info=error)
    elif status_code in (401, 403):
        logger.warning(f"Authentication/Authorization error: {error}", extra=log_context)
    else:
        logger.info(f"Client error: {error}", extra=log_context)


def app_error_response(request: Request, exc: AppError) -> JSONResponse:
    """
    Render an AppError as a JSON response.

    Also used by middleware that short-circuits before routing, where the
    registered exception handlers do not apply.
    """
    settings = get_settings()
    request_id = _get_request_id(request)

    _log_error(request, exc, exc.status_code, request_id)

    challenge = getattr(exc, "www_authenticate", None)
    headers = {"WWW-Authenticate": challenge} if challenge else None

    return _create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        request_id=request_id,
        status_code=exc.status_code,
        context=exc.details or None,
        suggested_action=exc.suggested_action,
        is_production=settings.is_production,
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers for the FastAPI application."""
    settings = get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return app_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        request_id = _get_request_id(request)

        field_errors = []
        for error in exc.errors():
            field_path = ".".join(str(loc) for loc in error.get("loc", []))
            error_type = error.get("type", "")
            error_msg = VALIDATION_MESSAGES.get(error_type, error.get("msg", "Validation error"))

            value = error.get("input")
            if "password" in field_path.lower():
                value = None

            field_errors.append(
                FieldError(
                    field=field_path,
                    message=error_msg,
                    code=error_type.upper().replace(".", "_"),
                    value=value if isinstance(value, (str, int, float, bool)) else None,
                )
            )

        logger.info(
            f"Validation error: {len(field_errors)} field(s) failed validation",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            },
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            request_id=request_id,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=field_errors,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
            is_production=settings.is_production,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Routing errors (404 unknown path, 405 wrong method) in the same envelope."""
        return _create_error_response(
            error_code=HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
            message=str(exc.detail),
            request_id=_get_request_id(request),
            status_code=exc.status_code,
            is_production=settings.is_production,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        request_id = _get_request_id(request)

        logger.error(
            f"Unhandled exception: {exc}",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "error_type": type(exc).__name__,
            },
            exc_info=exc,
        )

        error_message = "An unexpected error occurred"
        context = None
        if not settings.is_production:
            error_message = f"An unexpected error occurred: {exc}"
            context = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
            }

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=error_message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            suggested_action="Please try again later. If the problem persists, contact support",
            is_production=settings.is_production,
        )

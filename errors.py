"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to the `{success: false, error, code}` envelope.

Request-shape failures raised by FastAPI itself (invalid JSON, missing or
malformed fields) are mapped to 400 so clients see one error contract.
Non-AppError exceptions are logged and surfaced as an opaque 500.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"


class OtpMismatchError(AppError):
    status_code = 400
    error_code = "otp_mismatch"


class OtpExpiredError(AppError):
    status_code = 410
    error_code = "otp_expired"


class OtpAttemptsExceededError(AppError):
    status_code = 429
    error_code = "otp_attempts_exceeded"


class ServerError(AppError):
    """Store or gateway failure. The message is safe to show to clients."""

    status_code = 500
    error_code = "server_error"


def _field_name(loc: tuple) -> Optional[str]:
    # loc looks like ("body", "authProvider") or ("query", "userId")
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or None


def request_validation_to_app_error(exc: RequestValidationError) -> ValidationError:
    """Collapse FastAPI's error list into a single ValidationError."""
    errors = exc.errors()
    if not errors:
        return ValidationError("Invalid request")

    first = errors[0]
    if first.get("type") == "json_invalid":
        return ValidationError("Invalid JSON body")

    field = _field_name(tuple(first.get("loc", ())))
    if first.get("type") == "missing":
        return ValidationError(f"{field or 'body'} is required", field=field)

    ctx_error = (first.get("ctx") or {}).get("error")
    message = str(ctx_error) if ctx_error else first.get("msg", "Invalid request")
    if field and not ctx_error:
        message = f"{field}: {message}"
    return ValidationError(message, field=field)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        err = request_validation_to_app_error(exc)
        log.info(
            "request_rejected",
            path=request.url.path,
            reason=err.message,
        )
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "An internal server error occurred.",
                "code": "internal_error",
            },
        )

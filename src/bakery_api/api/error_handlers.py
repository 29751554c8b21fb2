"""
bakery_api.api.error_handlers

Terminal error normalizer for the HTTP surface.

Responsibilities:
- Turn any failure into the uniform error envelope with the mapped status code.
- Route framework-level failures (unknown routes, pydantic validation, uncaught
  exceptions) through the same envelope as pipeline failures.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bakery_api.errors import (
    ApiError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
    error_envelope,
)
from bakery_api.observability.logging import get_logger
from bakery_api.settings import Settings

log = get_logger(__name__)


def error_response(exc: BaseException, settings: Settings) -> JSONResponse:
    status_code, body = error_envelope(exc, expose_internals=settings.expose_internals)
    if isinstance(exc, ValidationError):
        log.info("request_invalid", fields=exc.fields)
    elif isinstance(exc, ApiError):
        log.info("request_failed", error=exc.kind.value, status=status_code)
    return JSONResponse(status_code=status_code, content=body)


def _from_http_exception(request: Request, exc: StarletteHTTPException) -> ApiError | Exception:
    # 405 is reported as 404: an undeclared method is an undeclared endpoint.
    if exc.status_code in (404, 405):
        return NotFoundError("Route", f"{request.method} {request.url.path}")
    if exc.status_code == 401:
        return UnauthenticatedError()
    if exc.status_code == 403:
        return ForbiddenError()
    if exc.status_code == 400:
        return ValidationError(str(exc.detail))
    return exc


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return error_response(exc, request.app.state.settings)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        violations = [
            {
                "field": ".".join(str(loc) for loc in e["loc"] if loc != "body"),
                "message": e["msg"],
            }
            for e in exc.errors()
        ]
        return error_response(
            ValidationError("Invalid request data", violations=violations),
            request.app.state.settings,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(_from_http_exception(request, exc), request.app.state.settings)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return error_response(exc, request.app.state.settings)


# --- Module Notes -----------------------------------------------------------
# Pipeline endpoints call `error_response` directly from the dispatcher; the
# handlers above only cover requests that never reach a declared endpoint.

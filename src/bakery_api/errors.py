"""
bakery_api.errors

Typed error taxonomy shared by guards, validators and business handlers.

Responsibilities:
- Define one exception class per wire-visible error kind.
- Own the single kind -> HTTP status lookup table.
- Build the error envelope `{success: false, error, message, details?}`.
"""

from __future__ import annotations

import enum
from typing import Any

from bakery_api.observability.logging import get_logger

log = get_logger(__name__)


class ErrorKind(enum.StrEnum):
    # Values are the `error` field of the envelope; treat as stable API contract.
    validation = "ValidationError"
    unauthenticated = "UnauthenticatedError"
    forbidden = "ForbiddenError"
    not_found = "NotFoundError"
    conflict = "ConflictError"
    unexpected = "UnexpectedError"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.validation: 400,
    ErrorKind.unauthenticated: 401,
    ErrorKind.forbidden: 403,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 409,
    ErrorKind.unexpected: 500,
}

GENERIC_UNEXPECTED_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    kind: ErrorKind = ErrorKind.unexpected

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationError(ApiError):
    """Input failed a rule set; `details` lists every violating field."""

    kind = ErrorKind.validation

    def __init__(self, message: str, *, violations: list[dict[str, str]] | None = None) -> None:
        super().__init__(message, details=violations or [])

    @property
    def fields(self) -> list[str]:
        return [v["field"] for v in self.details]


class UnauthenticatedError(ApiError):
    kind = ErrorKind.unauthenticated

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(ApiError):
    kind = ErrorKind.forbidden

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class NotFoundError(ApiError):
    kind = ErrorKind.not_found

    def __init__(self, resource: str, identifier: Any = None) -> None:
        if identifier is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} not found", details={"id": identifier})


class ConflictError(ApiError):
    kind = ErrorKind.conflict


class UnexpectedError(ApiError):
    kind = ErrorKind.unexpected

    def __init__(self, message: str = GENERIC_UNEXPECTED_MESSAGE, *, details: Any = None) -> None:
        super().__init__(message, details=details)


def normalize(exc: BaseException, *, expose_internals: bool = False) -> ApiError:
    """
    Map any failure onto the taxonomy.

    Known kinds pass through untouched. Anything else is logged with the bound
    request context (request_id/path/method) and replaced by a generic
    UnexpectedError; internals are only attached when `expose_internals` is set.
    """

    if isinstance(exc, ApiError):
        return exc

    log.error("unexpected_error", error_type=type(exc).__name__, exc_info=exc)
    details = None
    if expose_internals:
        details = {"type": type(exc).__name__, "detail": str(exc)}
    return UnexpectedError(details=details)


def error_envelope(exc: BaseException, *, expose_internals: bool = False) -> tuple[int, dict[str, Any]]:
    err = normalize(exc, expose_internals=expose_internals)
    body: dict[str, Any] = {
        "success": False,
        "error": err.kind.value,
        "message": err.message,
    }
    if err.details:
        body["details"] = err.details
    return err.status_code, body


# --- Module Notes -----------------------------------------------------------
# Status codes must only come from STATUS_BY_KIND; handlers never pick a status
# for a failure themselves.

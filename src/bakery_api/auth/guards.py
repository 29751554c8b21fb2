"""
bakery_api.auth.guards

Pipeline guards for authentication and authorization.

Responsibilities:
- Convert a session credential (cookie or bearer header) into an `Identity`.
- Enforce the role hierarchy for an endpoint.
"""

from __future__ import annotations

from collections.abc import Collection

from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import Request

from bakery_api.auth.models import Identity
from bakery_api.auth.roles import Role
from bakery_api.auth.sessions import SessionStore
from bakery_api.errors import ForbiddenError, UnauthenticatedError
from bakery_api.observability.logging import get_logger

log = get_logger(__name__)

INVALID_SESSION_MESSAGE = "Invalid or expired session"


def extract_credential(request: Request, *, cookie_name: str) -> str | None:
    # Cookie first (browser storefront), then bearer header (API clients).
    token = request.cookies.get(cookie_name)
    if token:
        return token
    scheme, param = get_authorization_scheme_param(request.headers.get("authorization"))
    if scheme.lower() == "bearer" and param:
        return param
    return None


async def authenticate(request: Request, *, store: SessionStore, cookie_name: str) -> Identity:
    token = extract_credential(request, cookie_name=cookie_name)
    if token is None:
        raise UnauthenticatedError()

    identity = await store.resolve(token)
    if identity is None:
        # Malformed, expired and forged tokens are indistinguishable to the caller.
        log.info("session_rejected")
        raise UnauthenticatedError(INVALID_SESSION_MESSAGE)
    return identity


def authorize(
    identity: Identity | None,
    *,
    min_role: Role | None = None,
    roles: Collection[Role] | None = None,
) -> Identity:
    if identity is None:
        raise UnauthenticatedError()
    if min_role is not None and not identity.role.satisfies(min_role):
        log.info("access_denied", subject=identity.subject, role=identity.role.value)
        raise ForbiddenError()
    if roles is not None and identity.role not in roles:
        log.info("access_denied", subject=identity.subject, role=identity.role.value)
        raise ForbiddenError()
    return identity


# --- Module Notes -----------------------------------------------------------
# Denial messages are deliberately terse; the required role is never echoed back.

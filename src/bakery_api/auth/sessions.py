"""
bakery_api.auth.sessions

Session token issuing and the session store boundary.

Responsibilities:
- Issue signed session tokens carrying subject + role.
- Resolve an opaque token to an `Identity` (or nothing) via a `SessionStore`.

Note:
- Tokens are HS256 JWTs; the store interface lets a server-side session table replace them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import jwt
from jwt import InvalidTokenError

from bakery_api.auth.models import Identity
from bakery_api.auth.roles import Role
from bakery_api.settings import Settings


@dataclass(frozen=True, slots=True)
class SessionConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionConfig:
        return cls(
            alg=settings.session_alg,
            issuer=settings.session_issuer,
            audience=settings.session_audience,
            secret=settings.session_secret,
        )


class SessionStore(Protocol):
    async def resolve(self, token: str) -> Identity | None:
        """Return the identity behind `token`, or None when it is invalid or expired."""
        ...


def issue_session_token(
    *,
    cfg: SessionConfig,
    subject: str,
    role: Role,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "role": role.value,
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


class JwtSessionStore:
    """
    Stateless store: every resolve re-verifies signature and registered claims.
    """

    def __init__(self, cfg: SessionConfig) -> None:
        self._cfg = cfg

    async def resolve(self, token: str) -> Identity | None:
        try:
            payload = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                audience=self._cfg.audience,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except InvalidTokenError:
            return None

        subject = str(payload.get("sub", ""))
        role = Role.parse(payload.get("role"))
        if not subject or role is None:
            return None

        return Identity(
            subject=subject,
            role=role,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            session_id=payload.get("jti"),
        )


# --- Module Notes -----------------------------------------------------------
# The authentication guard (`auth.guards.authenticate`) is the only caller of
# SessionStore.resolve.

"""
bakery_api.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Identity`) handed to guards and handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bakery_api.auth.roles import Role


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Resolved principal for the current request. Never persisted, never mutated.
    """

    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime
    session_id: str | None = None

    def to_public(self) -> dict[str, Any]:
        return {
            "id": self.subject,
            "role": self.role.value,
            "issuedAt": self.issued_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
        }


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it crosses the guard -> handler boundary on every request.

"""
bakery_api.auth.roles

Closed role enumeration with a total order.

Responsibilities:
- Define the storefront roles and their rank.
- Compare roles by rank (never by string) for minimum-role checks.
"""

from __future__ import annotations

import enum


class Role(enum.StrEnum):
    # Wire values are stored in session tokens; declaration order is the hierarchy.
    customer = "customer"
    staff = "staff"
    customer_service = "customerService"
    admin = "admin"

    @property
    def rank(self) -> int:
        return _RANK[self]

    def satisfies(self, minimum: Role) -> bool:
        return self.rank >= minimum.rank

    @classmethod
    def parse(cls, value: object) -> Role | None:
        try:
            return cls(str(value))
        except ValueError:
            return None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank


_RANK: dict[Role, int] = {role: i for i, role in enumerate(Role, start=1)}


def roles_at_or_below(role: Role) -> list[Role]:
    return [r for r in Role if r.rank <= role.rank]


def can_manage(manager: Role, target: Role) -> bool:
    # A user may manage accounts with an equal or lower role.
    return manager.rank >= target.rank

"""
bakery_api.services.users

Account management on top of the user repository.

Responsibilities:
- Provision the account behind a session subject on first sync.
- Self-service profile updates.
- Admin management bounded by the role hierarchy (`can_manage`).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.auth.models import Identity
from bakery_api.auth.roles import Role, can_manage
from bakery_api.db.models import User
from bakery_api.db.repositories.users import UserRepo
from bakery_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bakery_api.observability.logging import get_logger
from bakery_api.services.catalog import pagination

log = get_logger(__name__)

SEARCH_LIMIT = 20


class UserService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)

    async def sync(self, identity: Identity, *, email: str, name: str) -> tuple[User, bool]:
        """
        Return the account for `identity`, creating it when missing.

        The boolean is True when the account was created by this call.
        """

        user = await self._users.get_by_subject(identity.subject)
        if user is not None:
            return user, False
        if await self._users.get_by_email(email) is not None:
            raise ConflictError("A user with this email already exists")

        try:
            user = await self._users.create(
                subject=identity.subject,
                email=email,
                name=name,
                role=identity.role.value,
            )
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError("A user with this email already exists") from e
        log.info("user_created", user_id=user.id, role=user.role)
        return user, True

    async def current(self, identity: Identity) -> User:
        user = await self._users.get_by_subject(identity.subject)
        if user is None:
            raise NotFoundError("User profile")
        return user

    async def update_current(self, identity: Identity, data: dict[str, Any]) -> User:
        user = await self.current(identity)
        await self._users.update(user, self._merged(user, data))
        await self._session.commit()
        return user

    async def get(self, user_id: int) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self, *, page: int, limit: int) -> dict[str, Any]:
        items, total = await self._users.list_page(offset=(page - 1) * limit, limit=limit)
        return {
            "users": [u.to_dict() for u in items],
            "pagination": pagination(page=page, limit=limit, total=total),
        }

    async def search(self, term: str) -> list[User]:
        return await self._users.search(term, limit=SEARCH_LIMIT)

    async def update_user(self, manager: Identity, user_id: int, data: dict[str, Any]) -> User:
        user = await self.get(user_id)
        if not can_manage(manager.role, _stored_role(user)):
            raise ForbiddenError("Cannot manage a user with a higher role")

        role = data.get("role")
        if role is not None and not can_manage(manager.role, Role(role)):
            raise ForbiddenError("Cannot assign a role higher than your own")

        await self._users.update(user, self._merged(user, data))
        await self._session.commit()
        log.info("user_updated", user_id=user_id, by=manager.subject, fields=sorted(data))
        return user

    async def delete_user(self, manager: Identity, user_id: int) -> None:
        user = await self.get(user_id)
        if user.subject == manager.subject:
            raise ValidationError(
                "Cannot delete your own account",
                violations=[{"field": "id", "message": "Cannot delete your own account"}],
            )
        if not can_manage(manager.role, _stored_role(user)):
            raise ForbiddenError("Cannot delete a user with a higher role")

        await self._users.delete(user)
        await self._session.commit()
        log.info("user_deleted", user_id=user_id, by=manager.subject)

    @staticmethod
    def _merged(user: User, data: dict[str, Any]) -> dict[str, Any]:
        # Profile sub-fields not sent are kept.
        if "profile" in data:
            return {**data, "profile": {**(user.profile or {}), **data["profile"]}}
        return data


def _stored_role(user: User) -> Role:
    # Unknown stored values rank as the highest role so they can only be managed by admins.
    return Role.parse(user.role) or Role.admin

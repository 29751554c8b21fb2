"""
bakery_api.db.repositories.users

Repository for `User` entities.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.db.models import User
from bakery_api.db.repositories.filters import LIKE_ESCAPE, contains_pattern

FIELD_MAP = {
    "name": "name",
    "role": "role",
    "profile": "profile",
}


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, subject: str, email: str, name: str, role: str) -> User:
        user = User(subject=subject, email=email.lower(), name=name, role=role)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_subject(self, subject: str) -> User | None:
        stmt = select(User).where(User.subject == subject)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_page(self, *, offset: int, limit: int) -> tuple[list[User], int]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit)
        items = list((await self._session.execute(stmt)).scalars().all())
        total = int((await self._session.execute(select(func.count(User.id)))).scalar_one())
        return items, total

    async def search(self, term: str, *, limit: int) -> list[User]:
        pattern = contains_pattern(term)
        stmt = (
            select(User)
            .where(
                or_(
                    User.name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(User.name, User.id)
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(self, user: User, data: dict[str, Any]) -> User:
        for key, value in data.items():
            if key in FIELD_MAP:
                setattr(user, FIELD_MAP[key], value)
        await self._session.flush()
        return user

    async def delete(self, user: User) -> None:
        await self._session.delete(user)
        await self._session.flush()

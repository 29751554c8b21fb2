"""
bakery_api.db.repositories.categories

Repository for `Category` entities.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.db.models import Category

# Wire name -> column attribute.
FIELD_MAP = {
    "name": "name",
    "description": "description",
    "image": "image",
    "parentId": "parent_id",
    "displayOrder": "display_order",
    "active": "active",
}


class CategoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, data: dict[str, Any]) -> Category:
        category = Category(**{FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP})
        self._session.add(category)
        await self._session.flush()
        return category

    async def get(self, category_id: int) -> Category | None:
        return await self._session.get(Category, category_id)

    async def get_by_name(self, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_active(self) -> list[Category]:
        stmt = (
            select(Category)
            .where(Category.active.is_(True))
            .order_by(Category.display_order, Category.name)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_page(self, *, offset: int, limit: int, descending: bool = False) -> list[Category]:
        order = (Category.display_order.desc(), Category.name.desc()) if descending else (
            Category.display_order,
            Category.name,
        )
        stmt = select(Category).order_by(*order).offset(offset).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self) -> int:
        return int((await self._session.execute(select(func.count(Category.id)))).scalar_one())

    async def parent_map(self) -> dict[int, int | None]:
        rows = await self._session.execute(select(Category.id, Category.parent_id))
        return {row.id: row.parent_id for row in rows}

    async def update(self, category: Category, data: dict[str, Any]) -> Category:
        for key, value in data.items():
            if key in FIELD_MAP:
                setattr(category, FIELD_MAP[key], value)
        await self._session.flush()
        return category

    async def detach_children(self, parent_id: int) -> None:
        stmt = update(Category).where(Category.parent_id == parent_id).values(parent_id=None)
        await self._session.execute(stmt)

    async def delete(self, category: Category) -> None:
        await self._session.delete(category)
        await self._session.flush()

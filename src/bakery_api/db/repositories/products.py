"""
bakery_api.db.repositories.products

Repository for `Product` entities.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.db.models import Product
from bakery_api.db.repositories.filters import LIKE_ESCAPE, contains_pattern

FIELD_MAP = {
    "name": "name",
    "category": "category",
    "price": "price",
    "available": "available",
    "minOrderQuantity": "min_order_quantity",
    "maxOrderQuantity": "max_order_quantity",
    "description": "description",
    "image": "image",
    "preparationTimeHours": "preparation_time_hours",
    "hasTaxes": "has_taxes",
    "allergens": "allergens",
    "customOptions": "custom_options",
}

# Sortable wire names; anything else falls back to creation time.
SORT_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "category": Product.category,
    "sales": Product.sales,
    "createdAt": Product.created_at,
}


class ProductRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, data: dict[str, Any]) -> Product:
        product = Product(**{FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP})
        self._session.add(product)
        await self._session.flush()
        return product

    async def get(self, product_id: int) -> Product | None:
        return await self._session.get(Product, product_id)

    async def list_page(
        self,
        *,
        offset: int,
        limit: int,
        sort: str | None = None,
        descending: bool = True,
        name_contains: str | None = None,
    ) -> tuple[list[Product], int]:
        column = SORT_COLUMNS.get(sort or "", Product.created_at)
        stmt = select(Product)
        count_stmt = select(func.count(Product.id))
        if name_contains:
            matches = Product.name.ilike(contains_pattern(name_contains), escape=LIKE_ESCAPE)
            stmt = stmt.where(matches)
            count_stmt = count_stmt.where(matches)
        stmt = stmt.order_by(column.desc() if descending else column.asc(), Product.id)
        stmt = stmt.offset(offset).limit(limit)
        items = list((await self._session.execute(stmt)).scalars().all())
        total = int((await self._session.execute(count_stmt)).scalar_one())
        return items, total

    async def update(self, product: Product, data: dict[str, Any]) -> Product:
        for key, value in data.items():
            if key in FIELD_MAP:
                setattr(product, FIELD_MAP[key], value)
        await self._session.flush()
        return product

    async def delete(self, product: Product) -> None:
        await self._session.delete(product)
        await self._session.flush()

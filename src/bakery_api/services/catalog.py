"""
bakery_api.services.catalog

Catalog business rules on top of the category/product repositories.

Responsibilities:
- Enforce uniqueness, parent existence and hierarchy acyclicity for categories.
- Enforce order-quantity consistency for products.
- Shape paginated listings and the public category tree.
"""

from __future__ import annotations

import math
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.db.models import Category, Product
from bakery_api.db.repositories.categories import CategoryRepo
from bakery_api.db.repositories.products import ProductRepo
from bakery_api.errors import ConflictError, NotFoundError, ValidationError
from bakery_api.observability.logging import get_logger

log = get_logger(__name__)

DUPLICATE_CATEGORY_MESSAGE = "Category with this name already exists"


def pagination(*, page: int, limit: int, total: int) -> dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def _creates_cycle(child_id: int, parent_id: int, parents: dict[int, int | None]) -> bool:
    current: int | None = parent_id
    seen: set[int] = set()
    while current is not None:
        if current == child_id or current in seen:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def build_category_tree(categories: list[Category]) -> list[dict[str, Any]]:
    """
    Nest categories under their parents.

    Categories whose parent is absent from `categories` (inactive or deleted), or
    whose parent link would close a cycle, are promoted to roots. Siblings are
    ordered by displayOrder, then name.
    """

    nodes = {c.id: {**c.to_dict(), "children": []} for c in categories}
    parents = {c.id: c.parent_id for c in categories}
    roots: list[dict[str, Any]] = []

    for c in categories:
        node = nodes[c.id]
        parent = nodes.get(c.parent_id) if c.parent_id is not None else None
        if parent is not None and not _creates_cycle(c.id, c.parent_id, parents):
            parent["children"].append(node)
        else:
            roots.append(node)

    def _sort(level: list[dict[str, Any]]) -> None:
        level.sort(key=lambda n: (n["displayOrder"], n["name"]))
        for n in level:
            _sort(n["children"])

    _sort(roots)
    return roots


class CatalogService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._categories = CategoryRepo(session)
        self._products = ProductRepo(session)

    # Categories

    async def category_tree(self) -> list[dict[str, Any]]:
        return build_category_tree(await self._categories.list_active())

    async def list_categories(self, *, page: int, limit: int, order: str = "asc") -> dict[str, Any]:
        items = await self._categories.list_page(
            offset=(page - 1) * limit, limit=limit, descending=order == "desc"
        )
        total = await self._categories.count()
        return {
            "categories": [c.to_dict() for c in items],
            "pagination": pagination(page=page, limit=limit, total=total),
        }

    async def get_category(self, category_id: int) -> Category:
        category = await self._categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    async def create_category(self, data: dict[str, Any]) -> Category:
        if await self._categories.get_by_name(data["name"]) is not None:
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)
        parent_id = data.get("parentId")
        if parent_id is not None and await self._categories.get(parent_id) is None:
            raise NotFoundError("Parent category", parent_id)

        try:
            category = await self._categories.create(data)
            await self._session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent insert with the same name.
            await self._session.rollback()
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE) from e
        log.info("category_created", category_id=category.id)
        return category

    async def update_category(self, category_id: int, data: dict[str, Any]) -> Category:
        category = await self.get_category(category_id)

        name = data.get("name")
        if name is not None and name != category.name:
            if await self._categories.get_by_name(name) is not None:
                raise ConflictError(DUPLICATE_CATEGORY_MESSAGE)

        parent_id = data.get("parentId")
        if parent_id is not None:
            if parent_id == category_id:
                raise ValidationError(
                    "A category cannot be its own parent",
                    violations=[{"field": "parentId", "message": "Cannot reference itself"}],
                )
            if await self._categories.get(parent_id) is None:
                raise NotFoundError("Parent category", parent_id)
            if _creates_cycle(category_id, parent_id, await self._categories.parent_map()):
                raise ValidationError(
                    "Category hierarchy cannot contain cycles",
                    violations=[{"field": "parentId", "message": "Would create a cycle"}],
                )

        try:
            await self._categories.update(category, data)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError(DUPLICATE_CATEGORY_MESSAGE) from e
        log.info("category_updated", category_id=category_id, fields=sorted(data))
        return category

    async def delete_category(self, category_id: int) -> None:
        category = await self.get_category(category_id)
        await self._categories.detach_children(category_id)
        await self._categories.delete(category)
        await self._session.commit()
        log.info("category_deleted", category_id=category_id)

    async def toggle_category(self, category_id: int) -> Category:
        category = await self.get_category(category_id)
        await self._categories.update(category, {"active": not category.active})
        await self._session.commit()
        return category

    # Products

    async def list_products(
        self,
        *,
        page: int,
        limit: int,
        sort: str | None = None,
        order: str = "desc",
        q: str | None = None,
    ) -> dict[str, Any]:
        items, total = await self._products.list_page(
            offset=(page - 1) * limit,
            limit=limit,
            sort=sort,
            descending=order == "desc",
            name_contains=q,
        )
        return {
            "products": [p.to_dict() for p in items],
            "pagination": pagination(page=page, limit=limit, total=total),
        }

    async def get_product(self, product_id: int) -> Product:
        product = await self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def create_product(self, data: dict[str, Any]) -> Product:
        _check_quantities(data["minOrderQuantity"], data["maxOrderQuantity"])
        product = await self._products.create(data)
        await self._session.commit()
        log.info("product_created", product_id=product.id)
        return product

    async def update_product(self, product_id: int, data: dict[str, Any]) -> Product:
        product = await self.get_product(product_id)
        _check_quantities(
            data.get("minOrderQuantity", product.min_order_quantity),
            data.get("maxOrderQuantity", product.max_order_quantity),
        )
        await self._products.update(product, data)
        await self._session.commit()
        log.info("product_updated", product_id=product_id, fields=sorted(data))
        return product

    async def delete_product(self, product_id: int) -> None:
        product = await self.get_product(product_id)
        await self._products.delete(product)
        await self._session.commit()
        log.info("product_deleted", product_id=product_id)

    async def toggle_product(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        await self._products.update(product, {"available": not product.available})
        await self._session.commit()
        return product


def _check_quantities(minimum: int, maximum: int) -> None:
    if minimum > maximum:
        raise ValidationError(
            "Minimum order quantity cannot exceed maximum order quantity",
            violations=[
                {"field": "minOrderQuantity", "message": "Must not exceed maxOrderQuantity"},
            ],
        )


# --- Module Notes -----------------------------------------------------------
# The service commits; repositories only flush. Handlers never touch the session directly.

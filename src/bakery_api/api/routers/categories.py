"""
bakery_api.api.routers.categories

Category endpoints.

Responsibilities:
- Public catalog browsing (active tree, single category).
- Admin management (paginated listing including inactive, create/update/delete/toggle).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from bakery_api.auth.roles import Role
from bakery_api.pipeline.endpoint import Endpoint, Reply, RequestContext, mount
from bakery_api.pipeline.schemas import (
    CategoryCreate,
    CategoryUpdate,
    IdParams,
    PaginationQuery,
)
from bakery_api.services.catalog import CatalogService


async def list_categories(ctx: RequestContext) -> dict[str, Any]:
    return {"categories": await CatalogService(ctx.session).category_tree()}


async def list_all_categories(ctx: RequestContext) -> dict[str, Any]:
    q = ctx.query
    return await CatalogService(ctx.session).list_categories(
        page=q["page"], limit=q["limit"], order=q["order"]
    )


async def get_category(ctx: RequestContext) -> dict[str, Any]:
    category = await CatalogService(ctx.session).get_category(ctx.params["id"])
    return category.to_dict()


async def create_category(ctx: RequestContext) -> Reply:
    category = await CatalogService(ctx.session).create_category(ctx.body)
    return Reply(category.to_dict(), message="Category created successfully")


async def update_category(ctx: RequestContext) -> Reply:
    category = await CatalogService(ctx.session).update_category(ctx.params["id"], ctx.body)
    return Reply(category.to_dict(), message="Category updated successfully")


async def delete_category(ctx: RequestContext) -> Reply:
    await CatalogService(ctx.session).delete_category(ctx.params["id"])
    return Reply(None, message="Category deleted successfully")


async def toggle_category_status(ctx: RequestContext) -> Reply:
    category = await CatalogService(ctx.session).toggle_category(ctx.params["id"])
    state = "activated" if category.active else "deactivated"
    return Reply(category.to_dict(), message=f"Category {state} successfully")


ENDPOINTS = [
    Endpoint("GET", "", list_categories),
    # Registered before "/{id}" so the literal segment wins.
    Endpoint("GET", "/admin/all", list_all_categories, min_role=Role.admin, query=PaginationQuery),
    Endpoint("GET", "/{id}", get_category, params=IdParams),
    Endpoint("POST", "", create_category, min_role=Role.admin, body=CategoryCreate, status_code=201),
    Endpoint("PUT", "/{id}", update_category, min_role=Role.admin, params=IdParams, body=CategoryUpdate),
    Endpoint("DELETE", "/{id}", delete_category, min_role=Role.admin, params=IdParams),
    Endpoint("PATCH", "/{id}/toggle-status", toggle_category_status, min_role=Role.admin, params=IdParams),
]

router = mount(APIRouter(prefix="/api/categories", tags=["categories"]), ENDPOINTS)

"""
bakery_api.api.routers.products

Product endpoints.

Responsibilities:
- Public paginated listing, search and detail.
- Admin management (create/update/delete/toggle availability).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from bakery_api.auth.roles import Role
from bakery_api.pipeline.endpoint import Endpoint, Reply, RequestContext, mount
from bakery_api.pipeline.schemas import (
    IdParams,
    PaginationQuery,
    ProductCreate,
    ProductUpdate,
    SearchQuery,
)
from bakery_api.services.catalog import CatalogService


async def list_products(ctx: RequestContext) -> dict[str, Any]:
    q = ctx.query
    return await CatalogService(ctx.session).list_products(
        page=q["page"], limit=q["limit"], sort=q.get("sort"), order=q["order"]
    )


async def search_products(ctx: RequestContext) -> dict[str, Any]:
    q = ctx.query
    return await CatalogService(ctx.session).list_products(
        page=q["page"], limit=q["limit"], q=q["q"], sort="name", order="asc"
    )


async def get_product(ctx: RequestContext) -> dict[str, Any]:
    return (await CatalogService(ctx.session).get_product(ctx.params["id"])).to_dict()


async def create_product(ctx: RequestContext) -> Reply:
    product = await CatalogService(ctx.session).create_product(ctx.body)
    return Reply(product.to_dict(), message="Product created successfully")


async def update_product(ctx: RequestContext) -> Reply:
    product = await CatalogService(ctx.session).update_product(ctx.params["id"], ctx.body)
    return Reply(product.to_dict(), message="Product updated successfully")


async def delete_product(ctx: RequestContext) -> Reply:
    await CatalogService(ctx.session).delete_product(ctx.params["id"])
    return Reply(None, message="Product deleted successfully")


async def toggle_product_availability(ctx: RequestContext) -> Reply:
    product = await CatalogService(ctx.session).toggle_product(ctx.params["id"])
    return Reply(product.to_dict(), message="Product availability updated")


ENDPOINTS = [
    Endpoint("GET", "", list_products, query=PaginationQuery),
    Endpoint("GET", "/search", search_products, query=SearchQuery),
    Endpoint("GET", "/{id}", get_product, params=IdParams),
    Endpoint("POST", "", create_product, min_role=Role.admin, body=ProductCreate, status_code=201),
    Endpoint("PUT", "/{id}", update_product, min_role=Role.admin, params=IdParams, body=ProductUpdate),
    Endpoint("DELETE", "/{id}", delete_product, min_role=Role.admin, params=IdParams),
    Endpoint(
        "PATCH",
        "/{id}/toggle-availability",
        toggle_product_availability,
        min_role=Role.admin,
        params=IdParams,
    ),
]

router = mount(APIRouter(prefix="/api/products", tags=["products"]), ENDPOINTS)

"""
bakery_api.api.routers.users

Account endpoints.

Responsibilities:
- Self-service: read and update the caller's own account.
- Lookup: search and fetch accounts for authenticated callers.
- Admin management: paginated listing, role changes and deletion.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from bakery_api.auth.roles import Role
from bakery_api.pipeline.endpoint import Endpoint, Reply, RequestContext, mount
from bakery_api.pipeline.schemas import (
    IdParams,
    PaginationQuery,
    SearchQuery,
    UserSelfUpdate,
    UserUpdate,
)
from bakery_api.services.users import UserService


async def get_current_user(ctx: RequestContext) -> dict[str, Any]:
    return (await UserService(ctx.session).current(ctx.identity)).to_dict()


async def update_current_user(ctx: RequestContext) -> Reply:
    user = await UserService(ctx.session).update_current(ctx.identity, ctx.body)
    return Reply(user.to_dict(), message="Profile updated successfully")


async def search_users(ctx: RequestContext) -> list[dict[str, Any]]:
    return [u.to_dict() for u in await UserService(ctx.session).search(ctx.query["q"])]


async def list_users(ctx: RequestContext) -> dict[str, Any]:
    q = ctx.query
    return await UserService(ctx.session).list_users(page=q["page"], limit=q["limit"])


async def get_user(ctx: RequestContext) -> dict[str, Any]:
    return (await UserService(ctx.session).get(ctx.params["id"])).to_dict()


async def update_user(ctx: RequestContext) -> Reply:
    user = await UserService(ctx.session).update_user(ctx.identity, ctx.params["id"], ctx.body)
    return Reply(user.to_dict(), message="User updated successfully")


async def delete_user(ctx: RequestContext) -> Reply:
    await UserService(ctx.session).delete_user(ctx.identity, ctx.params["id"])
    return Reply(None, message="User deleted successfully")


ENDPOINTS = [
    # Literal segments are registered before "/{id}".
    Endpoint("GET", "/me", get_current_user, authenticate=True),
    Endpoint("PUT", "/me", update_current_user, authenticate=True, body=UserSelfUpdate),
    Endpoint("GET", "/search", search_users, authenticate=True, query=SearchQuery),
    Endpoint("GET", "", list_users, min_role=Role.admin, query=PaginationQuery),
    Endpoint("GET", "/{id}", get_user, authenticate=True, params=IdParams),
    Endpoint("PUT", "/{id}", update_user, min_role=Role.admin, params=IdParams, body=UserUpdate),
    Endpoint("DELETE", "/{id}", delete_user, min_role=Role.admin, params=IdParams),
]

router = mount(APIRouter(prefix="/api/users", tags=["users"]), ENDPOINTS)

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from bakery_api.auth.roles import Role, roles_at_or_below
from bakery_api.pipeline.endpoint import Endpoint, Reply, RequestContext, mount
from bakery_api.pipeline.schemas import ProfileSync
from bakery_api.services.users import UserService


async def get_me(ctx: RequestContext) -> dict[str, Any]:
    identity = ctx.identity
    return {
        **identity.to_public(),
        "grantedRoles": [r.value for r in roles_at_or_below(identity.role)],
    }


async def sync_profile(ctx: RequestContext) -> Reply:
    user, created = await UserService(ctx.session).sync(
        ctx.identity, email=ctx.body["email"], name=ctx.body["name"]
    )
    if created:
        return Reply(user.to_dict(), message="User profile created", status_code=201)
    return Reply(user.to_dict(), message="User profile already exists")


ENDPOINTS = [
    Endpoint("GET", "/me", get_me, min_role=Role.customer),
    Endpoint("POST", "/sync", sync_profile, authenticate=True, body=ProfileSync),
]

router = mount(APIRouter(prefix="/api/profile", tags=["profile"]), ENDPOINTS)

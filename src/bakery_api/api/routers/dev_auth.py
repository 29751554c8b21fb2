from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from bakery_api.auth.roles import Role
from bakery_api.auth.sessions import SessionConfig, issue_session_token
from bakery_api.errors import NotFoundError
from bakery_api.pipeline.endpoint import Endpoint, RequestContext, mount
from bakery_api.pipeline.schemas import DevTokenRequest


async def mint_dev_token(ctx: RequestContext) -> JSONResponse:
    settings = ctx.settings
    if settings.env == "prod":
        raise NotFoundError("Route", f"{ctx.request.method} {ctx.request.url.path}")

    ttl = timedelta(minutes=ctx.body["ttlMinutes"])
    token = issue_session_token(
        cfg=SessionConfig.from_settings(settings),
        subject=ctx.body["subject"],
        role=Role(ctx.body["role"]),
        ttl=ttl,
    )
    response = JSONResponse(
        status_code=201,
        content=jsonable_encoder(
            {"success": True, "data": {"accessToken": token, "tokenType": "bearer"}}
        ),
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return response


ENDPOINTS = [
    Endpoint("POST", "/token", mint_dev_token, body=DevTokenRequest, status_code=201),
]

router = mount(APIRouter(prefix="/api/dev", tags=["dev"]), ENDPOINTS)

"""
bakery_api.pipeline.endpoint

Endpoint declarations and the ordered request pipeline.

Responsibilities:
- Declare endpoints as (method, path, guards, rule sets, handler).
- Run sanitize -> authenticate -> authorize -> validate -> handler strictly in order.
- Turn the first failure into exactly one error envelope; wrap success in the success envelope.
- Register declarations on a FastAPI `APIRouter`.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.api.error_handlers import error_response
from bakery_api.auth.guards import authenticate, authorize
from bakery_api.auth.models import Identity
from bakery_api.auth.roles import Role
from bakery_api.errors import ValidationError
from bakery_api.pipeline.rules import RuleSet, validate_or_raise
from bakery_api.pipeline.sanitize import sanitize
from bakery_api.settings import Settings


@dataclass(slots=True)
class RequestContext:
    """
    Request-scoped state threaded through the stages. Never shared across requests.
    """

    request: Request
    settings: Settings
    session: AsyncSession | None = None
    body: Any = None
    query: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    identity: Identity | None = None
    body_error: str | None = None


@dataclass(frozen=True, slots=True)
class Reply:
    data: Any = None
    message: str | None = None
    status_code: int | None = None


Handler = Callable[[RequestContext], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class Endpoint:
    method: str
    path: str
    handler: Handler
    authenticate: bool = False
    min_role: Role | None = None
    roles: frozenset[Role] | None = None
    body: type[RuleSet] | None = None
    query: type[RuleSet] | None = None
    params: type[RuleSet] | None = None
    sanitize: bool = True
    status_code: int = 200
    summary: str | None = None

    @property
    def requires_identity(self) -> bool:
        return self.authenticate or self.min_role is not None or self.roles is not None

    @property
    def requires_role(self) -> bool:
        return self.min_role is not None or self.roles is not None


_NO_BODY_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS"})

MALFORMED_BODY_MESSAGE = "Malformed JSON body"


async def _read_body(request: Request, ctx: RequestContext) -> None:
    if request.method in _NO_BODY_METHODS:
        ctx.body = {}
        return
    raw = await request.body()
    if not raw.strip():
        ctx.body = {}
        return
    try:
        ctx.body = json.loads(raw)
    except (ValueError, RecursionError):
        # Reported at the validation stage, after the guards have run.
        ctx.body_error = MALFORMED_BODY_MESSAGE
        return
    if not isinstance(ctx.body, dict):
        ctx.body_error = "Request body must be a JSON object"


def _stage_sanitize(ctx: RequestContext) -> None:
    if ctx.body_error is None:
        try:
            ctx.body = sanitize(ctx.body)
        except RecursionError:
            ctx.body_error = MALFORMED_BODY_MESSAGE
    ctx.query = sanitize(ctx.query)
    ctx.params = sanitize(ctx.params)


async def _stage_authenticate(ctx: RequestContext) -> None:
    ctx.identity = await authenticate(
        ctx.request,
        store=ctx.request.app.state.session_store,
        cookie_name=ctx.settings.session_cookie_name,
    )


def _stage_authorize(endpoint: Endpoint, ctx: RequestContext) -> None:
    authorize(ctx.identity, min_role=endpoint.min_role, roles=endpoint.roles)


def _stage_validate(endpoint: Endpoint, ctx: RequestContext) -> None:
    # Each slot is all-or-nothing; the context only changes once every slot has passed.
    params = ctx.params
    query = ctx.query
    body = ctx.body
    if endpoint.params is not None:
        params = validate_or_raise(endpoint.params, ctx.params, coerce=True, slot="parameters")
    if endpoint.query is not None:
        query = validate_or_raise(endpoint.query, ctx.query, coerce=True, slot="query")
    if endpoint.body is not None:
        if ctx.body_error is not None:
            raise ValidationError(ctx.body_error, violations=[{"field": "body", "message": ctx.body_error}])
        body = validate_or_raise(endpoint.body, ctx.body, slot="body")
    ctx.params, ctx.query, ctx.body = params, query, body


def _success(endpoint: Endpoint, result: Any) -> Response:
    if isinstance(result, Response):
        # Handlers that need headers or cookies build their own envelope.
        return result
    if isinstance(result, Reply):
        data, message, status_code = result.data, result.message, result.status_code
    else:
        data, message, status_code = result, None, None
    content: dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code or endpoint.status_code, content=content)


async def dispatch(endpoint: Endpoint, request: Request) -> Response:
    settings: Settings = request.app.state.settings
    ctx = RequestContext(
        request=request,
        settings=settings,
        query=dict(request.query_params),
        params=dict(request.path_params),
    )
    try:
        await _read_body(request, ctx)
        if endpoint.sanitize:
            _stage_sanitize(ctx)
        if endpoint.requires_identity:
            await _stage_authenticate(ctx)
        if endpoint.requires_role:
            _stage_authorize(endpoint, ctx)
        _stage_validate(endpoint, ctx)

        async with request.app.state.sessionmaker() as session:
            ctx.session = session
            result = await endpoint.handler(ctx)
        return _success(endpoint, result)
    except Exception as exc:
        return error_response(exc, settings)


def _route(endpoint: Endpoint):
    async def route(request: Request) -> Response:
        return await dispatch(endpoint, request)

    route.__name__ = endpoint.handler.__name__
    return route


def mount(router: APIRouter, endpoints: Iterable[Endpoint]) -> APIRouter:
    for endpoint in endpoints:
        router.add_api_route(
            endpoint.path,
            _route(endpoint),
            methods=[endpoint.method],
            status_code=endpoint.status_code,
            summary=endpoint.summary,
            name=endpoint.handler.__name__,
            response_class=JSONResponse,
        )
    return router


# --- Module Notes -----------------------------------------------------------
# Path parameters arrive as strings (routes use plain `{id}` placeholders) so the
# params rule set owns coercion and the 400 response for malformed ids.

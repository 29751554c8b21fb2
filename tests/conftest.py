"""
tests.conftest

Shared fixtures: isolated settings, an app with its lifespan entered, an
in-process HTTP client, and session-token helpers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from bakery_api.api.app import create_app
from bakery_api.auth.roles import Role
from bakery_api.auth.sessions import SessionConfig, issue_session_token
from bakery_api.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bakery.db'}",
        session_secret="test-session-secret-0123456789",
        cors_allowed_origin="http://localhost:5173",
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings=settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not manage lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest.fixture
def token_for(settings: Settings) -> Callable[..., str]:
    def _issue(role: Role, subject: str = "user-1", ttl: timedelta = timedelta(hours=1)) -> str:
        return issue_session_token(
            cfg=SessionConfig.from_settings(settings),
            subject=subject,
            role=role,
            ttl=ttl,
        )

    return _issue


@pytest.fixture
def auth_headers(token_for: Callable[..., str]) -> Callable[[Role], dict[str, str]]:
    def _headers(role: Role) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(role)}"}

    return _headers

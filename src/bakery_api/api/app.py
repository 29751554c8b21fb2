"""
bakery_api.api.app

FastAPI app factory for the bakery storefront service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine, session store).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bakery_api import __version__
from bakery_api.api.error_handlers import register_error_handlers
from bakery_api.api.routers.categories import router as categories_router
from bakery_api.api.routers.dev_auth import router as dev_auth_router
from bakery_api.api.routers.health import router as health_router
from bakery_api.api.routers.products import router as products_router
from bakery_api.api.routers.profile import router as profile_router
from bakery_api.api.routers.users import router as users_router
from bakery_api.auth.sessions import JwtSessionStore, SessionConfig, SessionStore
from bakery_api.db.init_db import init_db
from bakery_api.db.session import create_engine, create_sessionmaker
from bakery_api.observability.logging import configure_logging, get_logger
from bakery_api.observability.middleware import RequestContextMiddleware
from bakery_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, session_store: SessionStore | None = None) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        missing = settings.missing_payment_settings()
        if missing:
            # Checkout degrades without these; the catalog keeps serving.
            log.warning("payment_config_incomplete", missing=missing)

        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Bakery Storefront API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = session_store or JwtSessionStore(SessionConfig.from_settings(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_allowed_origin],
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(profile_router)
    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(users_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Routers are module-level declarations; everything stateful (engine, settings,
# session store) hangs off app.state so tests can build isolated apps.

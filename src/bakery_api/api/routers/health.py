"""
bakery_api.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness checks (`/healthz`, `/api/health`).
- Provide readiness check (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bakery_api.api.deps import db_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/api/health")
async def api_health() -> dict[str, Any]:
    # Storefront clients expect the success envelope.
    return {
        "success": True,
        "message": "API is healthy",
        "data": {"timestamp": datetime.now(tz=UTC).isoformat()},
    }

"""Health check endpoint with database and object-storage probes.

Each probe has a short timeout. A "disconnected" dependency does not change
the overall status; the endpoint always returns 200 so load balancers keep
routing.
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter
from sqlalchemy import text

from centralapi import __version__
from centralapi.config import settings
from centralapi.database import get_engine

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

_CHECK_TIMEOUT = 3.0  # seconds per probe


async def _check_database() -> str:
    """Run SELECT 1 on a pooled connection."""

    async def _ping() -> None:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))

    try:
        await asyncio.wait_for(_ping(), timeout=_CHECK_TIMEOUT)
        return "connected"
    except Exception as exc:
        logger.debug("health_database_failed", error=str(exc))
        return "disconnected"


async def _check_storage() -> str:
    """HEAD the configured bucket."""
    from centralapi.utils.storage import head_bucket

    try:
        await asyncio.wait_for(asyncio.to_thread(head_bucket), timeout=_CHECK_TIMEOUT)
        return "connected"
    except Exception as exc:
        logger.debug("health_storage_failed", error=str(exc))
        return "disconnected"


@router.get("/health")
async def health_check() -> dict:
    database, storage = await asyncio.gather(_check_database(), _check_storage())
    return {
        "status": "ok",
        "version": __version__,
        "environment": settings.environment,
        "database": database,
        "storage": storage,
    }

"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging
import platform

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.dependencies import get_session_factory
from core.domain.value_objects import to_iso8601, utc_now


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": to_iso8601(utc_now()),
        "service": "storefront-orders",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory: async_sessionmaker = Depends(get_session_factory)):
    """
    Readiness check endpoint.

    Returns whether the order store answers queries.
    """
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"❌ Database readiness check failed: {e}")
        database = "unavailable"

    ready = database == "ok"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": to_iso8601(utc_now()),
            "checks": {"api": "ok", "database": database},
        },
    )

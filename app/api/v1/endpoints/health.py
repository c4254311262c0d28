"""Liveness and readiness probes."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.domain.exceptions import SqlNotConfiguredException
from app.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """200 when Postgres answers; 503 otherwise. Store and cache are informational."""
    from app.infrastructure.persistence.database import get_session_factory

    cache = getattr(request.app.state, "cache", None)
    report = ReadinessResponse(
        object_store=getattr(request.app.state, "object_store", None) is not None,
        cache=cache is not None and cache.is_available(),
    )
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (SqlNotConfiguredException, SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed: %s", e)
        report.status = "not_ready"
        report.database = str(e)
        return JSONResponse(status_code=503, content=report.model_dump())
    return report

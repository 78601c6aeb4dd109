"""Liveness and store connectivity probe."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..db.session import get_session
from ..schemas.health import HealthResponse
from .deps import get_app_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["meta"])
async def health(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse | JSONResponse:
    """Report service identity and whether the record store answers."""

    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        body = HealthResponse(
            status="error",
            database="disconnected",
            service=settings.service_name,
            version=settings.service_version,
        )
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())

    return HealthResponse(
        status="ok",
        database="connected",
        service=settings.service_name,
        version=settings.service_version,
    )


@router.head("/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)

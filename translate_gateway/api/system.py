"""
System endpoints: health, statistics and the dashboard.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from pathlib import Path
import logging

from translate_gateway.config import Settings
from translate_gateway.dependencies import (
    get_app_settings,
    get_logger,
    get_stats_store,
    get_system_service,
)
from translate_gateway.errors import InternalError, NotFoundError, StatsStoreError
from translate_gateway.schemas.schemas import ApiError, HealthResponse, StatsSnapshot
from translate_gateway.services.stats_service import StatsStore
from translate_gateway.services.system_service import SystemService

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"

router = APIRouter(tags=["System"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Process status, uptime (seconds) and memory usage."
)
async def health_check(
    system: SystemService = Depends(get_system_service),
    logger: logging.Logger = Depends(get_logger)
):
    """Get process health."""
    health = system.get_health()
    logger.info(f"Health check performed (uptime={health.uptime:.1f}s, rss={health.memory_usage.rss})")
    return health


@router.get(
    "/api/v1/stats",
    response_model=StatsSnapshot,
    responses={500: {"model": ApiError}},
    summary="Translation Statistics",
    description="""
    Aggregate counters since the stats file was created:
    request totals, average response time (ms) and the most
    frequent source/target languages.
    """
)
async def get_stats(
    stats: StatsStore = Depends(get_stats_store),
    settings: Settings = Depends(get_app_settings)
):
    """Get translation statistics."""
    try:
        return await stats.snapshot(top=settings.STATS_TOP_LANGUAGES)
    except StatsStoreError as e:
        raise InternalError(details=str(e)) from e


@router.get("/", include_in_schema=False)
async def dashboard():
    """Serve the statistics dashboard."""
    index = PUBLIC_DIR / "index.html"
    if not index.is_file():
        raise NotFoundError("/")
    return FileResponse(index)

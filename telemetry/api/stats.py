# GET /events/stats/*

from fastapi import APIRouter, Depends, HTTPException, Query, status
from telemetry.api.deps import get_analytics_service
from telemetry.api.params import parse_instant
from telemetry.core.exceptions import OperationCancelled
from telemetry.schemas.analytics import EventStats
from telemetry.schemas.envelope import DataResponse
from telemetry.services.analytics import AnalyticsService
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/events/stats", tags=["analytics"])


@router.get("/hourly", response_model=DataResponse[list[EventStats]])
async def get_hourly_stats(
        event_name: str | None = Query(default=None),
        from_time: str | None = Query(default=None, alias="from", description="RFC3339, defaults to now - 24h"),
        to_time: str | None = Query(default=None, alias="to", description="RFC3339, defaults to now"),
        service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Event counts and unique users per hour, newest bucket first.

    - **event_name**: restrict to one event name (all names when omitted)
    """
    try:
        stats = await service.get_hourly_stats(
            event_name or "",
            parse_instant(from_time),
            parse_instant(to_time)
        )
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error("hourly_stats_query_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to get hourly stats"
        )

    return DataResponse(data=stats)


@router.get("/daily", response_model=DataResponse[list[EventStats]])
async def get_daily_stats(
        event_name: str | None = Query(default=None),
        from_time: str | None = Query(default=None, alias="from", description="RFC3339, defaults to now - 30d"),
        to_time: str | None = Query(default=None, alias="to", description="RFC3339, defaults to now"),
        service: AnalyticsService = Depends(get_analytics_service)
):
    """Event counts and unique users per day, newest bucket first"""
    try:
        stats = await service.get_daily_stats(
            event_name or "",
            parse_instant(from_time),
            parse_instant(to_time)
        )
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error("daily_stats_query_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to get daily stats"
        )

    return DataResponse(data=stats)

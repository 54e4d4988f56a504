# Request-scoped wiring: one session, repository and service per request

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from telemetry.core.database import get_db
from telemetry.repositories.analytics import AnalyticsRepository, SqlAnalyticsRepository
from telemetry.repositories.events import EventRepository, SqlEventRepository
from telemetry.services.analytics import AnalyticsService
from telemetry.services.events import EventService


def get_event_repository(db: AsyncSession = Depends(get_db)) -> EventRepository:
    return SqlEventRepository(db)


def get_analytics_repository(db: AsyncSession = Depends(get_db)) -> AnalyticsRepository:
    return SqlAnalyticsRepository(db)


def get_event_service(
        repository: EventRepository = Depends(get_event_repository)
) -> EventService:
    return EventService(repository)


def get_analytics_service(
        repository: AnalyticsRepository = Depends(get_analytics_repository)
) -> AnalyticsService:
    return AnalyticsService(repository)

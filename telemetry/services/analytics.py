from datetime import datetime, timedelta
from collections.abc import Callable

import structlog

from telemetry.core.exceptions import PersistenceFailure
from telemetry.repositories.analytics import AnalyticsRepository
from telemetry.schemas.analytics import EventStats
from telemetry.services.events import utcnow

logger = structlog.get_logger()

HOURLY_WINDOW = timedelta(hours=24)
DAILY_WINDOW = timedelta(days=30)


class AnalyticsService:
    """Rollup reads with default time windows"""

    def __init__(self, repository: AnalyticsRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock

    def _window(
            self,
            from_time: datetime | None,
            to_time: datetime | None,
            span: timedelta
    ) -> tuple[datetime, datetime]:
        now = self.clock()
        return (
            from_time if from_time is not None else now - span,
            to_time if to_time is not None else now
        )

    async def get_hourly_stats(
            self,
            event_name: str = "",
            from_time: datetime | None = None,
            to_time: datetime | None = None
    ) -> list[EventStats]:
        """Hourly buckets, defaulting to the last 24 hours. Empty name means all events."""
        from_time, to_time = self._window(from_time, to_time, HOURLY_WINDOW)

        try:
            return await self.repository.get_hourly_stats(event_name, from_time, to_time)
        except PersistenceFailure as e:
            logger.error("hourly_stats_failed", event_name=event_name, error=str(e))
            raise

    async def get_daily_stats(
            self,
            event_name: str = "",
            from_time: datetime | None = None,
            to_time: datetime | None = None
    ) -> list[EventStats]:
        """Daily buckets, defaulting to the last 30 days. Empty name means all events."""
        from_time, to_time = self._window(from_time, to_time, DAILY_WINDOW)

        try:
            return await self.repository.get_daily_stats(event_name, from_time, to_time)
        except PersistenceFailure as e:
            logger.error("daily_stats_failed", event_name=event_name, error=str(e))
            raise

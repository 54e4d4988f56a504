from datetime import datetime
from typing import Protocol

from sqlalchemy import Select, Table, select

from telemetry.models.event import events_daily, events_hourly
from telemetry.repositories.base import SqlRepository
from telemetry.schemas.analytics import EventStats


class AnalyticsRepository(Protocol):
    async def get_hourly_stats(
            self, event_name: str, from_time: datetime, to_time: datetime
    ) -> list[EventStats]: ...

    async def get_daily_stats(
            self, event_name: str, from_time: datetime, to_time: datetime
    ) -> list[EventStats]: ...


def build_stats_query(
        rollup: Table,
        event_name: str,
        from_time: datetime,
        to_time: datetime
) -> Select:
    """Inclusive bucket range read, optionally narrowed to one event name"""
    stmt = select(
        rollup.c.bucket,
        rollup.c.event_name,
        rollup.c.event_count,
        rollup.c.unique_users
    ).where(
        rollup.c.bucket >= from_time,
        rollup.c.bucket <= to_time
    )

    if event_name:
        stmt = stmt.where(rollup.c.event_name == event_name)

    return stmt.order_by(rollup.c.bucket.desc())


class SqlAnalyticsRepository(SqlRepository):
    """Read-only access to the hourly and daily rollups"""

    async def get_hourly_stats(
            self, event_name: str, from_time: datetime, to_time: datetime
    ) -> list[EventStats]:
        return await self._read(events_hourly, "hourly stats", event_name, from_time, to_time)

    async def get_daily_stats(
            self, event_name: str, from_time: datetime, to_time: datetime
    ) -> list[EventStats]:
        return await self._read(events_daily, "daily stats", event_name, from_time, to_time)

    async def _read(
            self,
            rollup: Table,
            operation: str,
            event_name: str,
            from_time: datetime,
            to_time: datetime
    ) -> list[EventStats]:
        stmt = build_stats_query(rollup, event_name, from_time, to_time)

        async with self.guard(operation):
            result = await self.db.execute(stmt)
            return [EventStats.model_validate(dict(row._mapping)) for row in result]

import pytest
from datetime import datetime, timedelta, timezone

from telemetry.core.exceptions import OperationCancelled, PersistenceFailure
from telemetry.schemas.analytics import EventStats
from telemetry.services.analytics import AnalyticsService

NOW = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


@pytest.mark.asyncio
async def test_hourly_defaults_to_last_24_hours(analytics_repository):
    service = AnalyticsService(analytics_repository, clock=fixed_clock)

    await service.get_hourly_stats()

    _, event_name, from_time, to_time = analytics_repository.calls[0]
    assert event_name == ""
    assert to_time == NOW
    assert to_time - from_time == timedelta(hours=24)


@pytest.mark.asyncio
async def test_daily_defaults_to_last_30_days(analytics_repository):
    service = AnalyticsService(analytics_repository, clock=fixed_clock)

    await service.get_daily_stats()

    kind, _, from_time, to_time = analytics_repository.calls[0]
    assert kind == "daily"
    assert to_time == NOW
    assert to_time - from_time == timedelta(days=30)


@pytest.mark.asyncio
async def test_default_window_ends_at_call_time(analytics_repository):
    service = AnalyticsService(analytics_repository)

    before = datetime.now(timezone.utc)
    await service.get_hourly_stats()
    after = datetime.now(timezone.utc)

    _, _, from_time, to_time = analytics_repository.calls[0]
    assert before <= to_time <= after
    assert to_time - from_time == timedelta(hours=24)


@pytest.mark.asyncio
async def test_explicit_bounds_are_kept(analytics_repository):
    service = AnalyticsService(analytics_repository, clock=fixed_clock)
    from_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
    to_time = datetime(2024, 1, 2, tzinfo=timezone.utc)

    await service.get_hourly_stats("app_launch", from_time, to_time)

    assert analytics_repository.calls[0] == ("hourly", "app_launch", from_time, to_time)


@pytest.mark.asyncio
async def test_only_missing_bound_is_defaulted(analytics_repository):
    service = AnalyticsService(analytics_repository, clock=fixed_clock)
    from_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    await service.get_daily_stats("", from_time, None)

    assert analytics_repository.calls[0] == ("daily", "", from_time, NOW)


@pytest.mark.asyncio
async def test_rows_are_returned_unchanged(analytics_repository):
    row = EventStats(bucket=NOW, event_name="app_launch", event_count=12, unique_users=3)
    analytics_repository.daily = [row]
    service = AnalyticsService(analytics_repository, clock=fixed_clock)

    assert await service.get_daily_stats() == [row]


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    PersistenceFailure("hourly stats"),
    OperationCancelled("hourly stats"),
])
async def test_store_errors_propagate(analytics_repository, error):
    analytics_repository.fail_with = error
    service = AnalyticsService(analytics_repository, clock=fixed_clock)

    with pytest.raises(type(error)):
        await service.get_hourly_stats()

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from telemetry.api.deps import get_analytics_repository, get_event_repository
from telemetry.core.exceptions import PersistenceFailure
from telemetry.main import app
from telemetry.repositories.events import EventFound, EventMissing
from telemetry.schemas.event import Event


class InMemoryEventRepository:
    """Event repository test double that records what it was asked to do"""

    def __init__(self):
        self.events: dict[int, Event] = {}
        self.created = []
        self.list_filters = []
        self.fail_with: Exception | None = None

    async def create(self, event):
        if self.fail_with:
            raise self.fail_with
        self.created.append(event)
        stored = Event(
            id=len(self.events) + 1,
            event_name=event.event_name,
            timestamp=event.timestamp,
            payload=event.payload,
            created_at=datetime.now(timezone.utc)
        )
        self.events[stored.id] = stored
        return stored

    async def get_by_id(self, event_id):
        if self.fail_with:
            raise self.fail_with
        if event_id in self.events:
            return EventFound(self.events[event_id])
        return EventMissing(event_id)

    async def list(self, event_filter):
        if self.fail_with:
            raise self.fail_with
        self.list_filters.append(event_filter)
        events = sorted(self.events.values(), key=lambda e: e.timestamp, reverse=True)
        return events[:event_filter.limit]


class InMemoryAnalyticsRepository:
    def __init__(self):
        self.hourly = []
        self.daily = []
        self.calls = []
        self.fail_with: Exception | None = None

    async def get_hourly_stats(self, event_name, from_time, to_time):
        self.calls.append(("hourly", event_name, from_time, to_time))
        if self.fail_with:
            raise self.fail_with
        return self.hourly

    async def get_daily_stats(self, event_name, from_time, to_time):
        self.calls.append(("daily", event_name, from_time, to_time))
        if self.fail_with:
            raise self.fail_with
        return self.daily


@pytest.fixture
def event_repository():
    return InMemoryEventRepository()


@pytest.fixture
def analytics_repository():
    return InMemoryAnalyticsRepository()


@pytest.fixture
def storage_error():
    return PersistenceFailure("insert event", "connection refused by db-01")


@pytest_asyncio.fixture
async def client(event_repository, analytics_repository):
    app.dependency_overrides[get_event_repository] = lambda: event_repository
    app.dependency_overrides[get_analytics_repository] = lambda: analytics_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

from datetime import datetime, timezone
from collections.abc import Callable

import structlog

from telemetry.core.exceptions import EventNotFound, InvalidEvent
from telemetry.repositories.events import EventMissing, EventRepository
from telemetry.schemas.event import Event, EventCreate, EventFilter, NewEvent

logger = structlog.get_logger()

DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 1000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_limit(limit: int) -> int:
    """Clamp a requested page size into [1, MAX_LIST_LIMIT]"""
    if limit <= 0:
        return DEFAULT_LIST_LIMIT
    return min(limit, MAX_LIST_LIMIT)


class EventService:
    """Validation and defaulting in front of the event repository"""

    def __init__(self, repository: EventRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock

    async def create_event(self, request: EventCreate) -> Event:
        """
        Validate and persist a new event.

        Raises InvalidEvent when the name is empty. A missing timestamp is
        replaced by the current UTC time. Storage failures are not retried.
        """
        if not request.event_name:
            raise InvalidEvent()

        new_event = NewEvent(
            event_name=request.event_name,
            timestamp=request.timestamp or self.clock(),
            payload=request.payload or {}
        )

        event = await self.repository.create(new_event)

        logger.info("event_created", event_id=event.id, event_name=event.event_name)
        return event

    async def get_event(self, event_id: int) -> Event:
        lookup = await self.repository.get_by_id(event_id)

        if isinstance(lookup, EventMissing):
            raise EventNotFound(event_id)

        return lookup.event

    async def list_events(self, event_filter: EventFilter) -> list[Event]:
        # Offset and the from/to ordering are passed through as given
        normalized = event_filter.model_copy(
            update={"limit": normalize_limit(event_filter.limit)}
        )
        return await self.repository.list(normalized)

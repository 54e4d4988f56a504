from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import Select, insert, select

from telemetry.models.event import Event as EventRecord
from telemetry.repositories.base import SqlRepository
from telemetry.schemas.event import Event, EventFilter, NewEvent


@dataclass(frozen=True)
class EventFound:
    event: Event


@dataclass(frozen=True)
class EventMissing:
    event_id: int


# Outcome of a point lookup. Failures are raised, never returned.
EventLookup = EventFound | EventMissing


class EventRepository(Protocol):
    async def create(self, event: NewEvent) -> Event: ...

    async def get_by_id(self, event_id: int) -> EventLookup: ...

    async def list(self, event_filter: EventFilter) -> list[Event]: ...


def build_list_query(event_filter: EventFilter) -> Select:
    """
    Build the listing query for a filter.

    Only the predicates present in the filter are ANDed together; a missing
    bound stays open. Results are always newest timestamp first.
    """
    stmt = select(EventRecord)

    if event_filter.event_name:
        stmt = stmt.where(EventRecord.event_name == event_filter.event_name)
    if event_filter.from_time is not None:
        stmt = stmt.where(EventRecord.timestamp >= event_filter.from_time)
    if event_filter.to_time is not None:
        stmt = stmt.where(EventRecord.timestamp <= event_filter.to_time)

    stmt = stmt.order_by(EventRecord.timestamp.desc())

    if event_filter.limit > 0:
        stmt = stmt.limit(event_filter.limit)
    if event_filter.offset > 0:
        stmt = stmt.offset(event_filter.offset)

    return stmt


class SqlEventRepository(SqlRepository):
    """Append-only access to the events table"""

    async def create(self, event: NewEvent) -> Event:
        stmt = (
            insert(EventRecord)
            .values(
                event_name=event.event_name,
                timestamp=event.timestamp,
                payload=event.payload
            )
            .returning(EventRecord.id, EventRecord.created_at)
        )

        async with self.guard("insert event"):
            result = await self.db.execute(stmt)
            row = result.one()
            await self.db.commit()

        return Event(
            id=row.id,
            event_name=event.event_name,
            timestamp=event.timestamp,
            payload=event.payload,
            created_at=row.created_at
        )

    async def get_by_id(self, event_id: int) -> EventLookup:
        stmt = select(EventRecord).where(EventRecord.id == event_id)

        async with self.guard("get event"):
            result = await self.db.execute(stmt)
            record = result.scalar_one_or_none()
            if record is None:
                return EventMissing(event_id)
            return EventFound(Event.model_validate(record))

    async def list(self, event_filter: EventFilter) -> list[Event]:
        stmt = build_list_query(event_filter)

        async with self.guard("list events"):
            result = await self.db.execute(stmt)
            return [Event.model_validate(record) for record in result.scalars()]

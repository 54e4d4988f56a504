# SQLAlchemy models

from sqlalchemy import (
    BigInteger, Column, DateTime, Index, Integer, JSON, MetaData, String, Table, func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite only autoincrements INTEGER PRIMARY KEY columns
EventId = BigInteger().with_variant(Integer(), "sqlite")
Payload = JSON().with_variant(JSONB(), "postgresql")


class Event(Base):
    __tablename__ = "events"

    id = Column(EventId, primary_key=True, autoincrement=True)
    event_name = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    payload = Column(Payload, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        # Composite index for filtered listings
        Index('idx_events_name_timestamp', 'event_name', 'timestamp'),
        Index('idx_events_timestamp', 'timestamp'),
    )


# Rollups are continuous aggregates maintained by TimescaleDB. They live in their
# own metadata so Base.metadata.create_all() never tries to create them as tables.
rollup_metadata = MetaData()


def _rollup(name: str) -> Table:
    return Table(
        name,
        rollup_metadata,
        Column("bucket", DateTime(timezone=True), nullable=False),
        Column("event_name", String, nullable=False),
        Column("event_count", BigInteger, nullable=False),
        Column("unique_users", BigInteger, nullable=False),
    )


events_hourly = _rollup("events_hourly")
events_daily = _rollup("events_daily")

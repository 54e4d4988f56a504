from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from telemetry.schemas.event import assume_utc


class EventStats(BaseModel):
    """One rollup row: counts for a single (bucket, event_name) pair"""
    bucket: datetime
    event_name: str
    event_count: int
    unique_users: int

    model_config = ConfigDict(from_attributes=True)

    @field_validator('bucket')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        return assume_utc(v)

# Pydantic schemas

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})",
    re.ASCII
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp; raises ValueError for anything else"""
    match = RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")

    date, clock, fraction, offset = match.groups()
    # datetime only keeps microseconds
    if fraction:
        clock += "." + fraction[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(f"{date}T{clock}{offset}")


def assume_utc(value: datetime | None) -> datetime | None:
    # Backends without zone support hand back naive values; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EventCreate(BaseModel):
    """Body of POST /events.

    ``event_name`` defaults to an empty string instead of being required so
    that a missing name is reported by the service as an invalid event, not
    as a malformed body. Timestamps must be RFC3339 strings.
    """

    event_name: str = ""
    timestamp: AwareDatetime | None = None
    payload: dict[str, Any] | None = None

    @field_validator('timestamp', mode='before')
    @classmethod
    def require_rfc3339(cls, v: Any) -> Any:
        # JSON numbers would otherwise be read as unix seconds
        if v is None or isinstance(v, datetime):
            return v
        if isinstance(v, str):
            return parse_rfc3339(v)
        raise ValueError("timestamp must be an RFC3339 string")


class NewEvent(BaseModel):
    """An event that has not been persisted yet (no id / created_at)"""

    event_name: str
    timestamp: datetime
    payload: dict[str, Any] = Field(default_factory=dict)


class Event(BaseModel):
    """A persisted event"""

    id: int
    event_name: str
    timestamp: datetime
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator('timestamp', 'created_at')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        return assume_utc(v)

    @field_validator('payload', mode='before')
    @classmethod
    def null_payload_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class EventFilter(BaseModel):
    """Query descriptor for listing events.

    Every field is optional; only the ones that are set narrow the result.
    ``from`` and ``to`` are inclusive bounds on ``timestamp``.
    """

    event_name: str = ""
    from_time: datetime | None = Field(default=None, alias="from")
    to_time: datetime | None = Field(default=None, alias="to")
    limit: int = 0
    offset: int = 0

    model_config = ConfigDict(populate_by_name=True)

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from telemetry.schemas.analytics import EventStats
from telemetry.schemas.envelope import DataResponse
from telemetry.schemas.event import Event, EventCreate


def test_event_wire_round_trip_keeps_payload_types():
    event = Event(
        id=7,
        event_name="app_launch",
        timestamp=datetime(2024, 2, 1, 10, 0, 0, 123000, tzinfo=timezone.utc),
        payload={
            "count": 3,
            "ratio": 0.5,
            "whole_float": 2.0,
            "flag": False,
            "missing": None,
            "tags": ["a", 1, {"deep": [1.25]}],
            "device": {"os": "blankon", "version": {"major": 12}},
        },
        created_at=datetime(2024, 2, 1, 10, 0, 1, tzinfo=timezone.utc),
    )

    parsed = Event.model_validate_json(event.model_dump_json())

    assert parsed.id == event.id
    assert parsed.event_name == event.event_name
    assert parsed.payload == event.payload
    assert isinstance(parsed.payload["count"], int)
    assert isinstance(parsed.payload["whole_float"], float)
    assert parsed.timestamp == event.timestamp


def test_event_wire_field_names():
    event = Event(
        id=1,
        event_name="x",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    body = json.loads(DataResponse[Event](data=event).model_dump_json())

    assert set(body) == {"data"}
    assert set(body["data"]) == {"id", "event_name", "timestamp", "payload", "created_at"}
    assert body["data"]["payload"] == {}


def test_naive_storage_timestamps_are_utc():
    event = Event(
        id=1,
        event_name="x",
        timestamp=datetime(2024, 1, 1, 8, 0),
        created_at=datetime(2024, 1, 1, 8, 0, 5),
        payload=None,
    )

    assert event.timestamp.tzinfo == timezone.utc
    assert event.created_at.tzinfo == timezone.utc
    assert event.payload == {}


def test_stats_bucket_is_utc():
    stats = EventStats(bucket=datetime(2024, 1, 1), event_name="x", event_count=2, unique_users=1)

    assert stats.bucket == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_create_body_defaults():
    body = EventCreate.model_validate_json('{"event_name": "app_launch"}')

    assert body.timestamp is None
    assert body.payload is None


def test_create_body_missing_name_is_empty():
    assert EventCreate.model_validate_json('{}').event_name == ""


@pytest.mark.parametrize("raw", [
    '{"event_name": "x", "payload": [1, 2]}',
    '{"event_name": "x", "timestamp": "yesterday"}',
    '{"event_name": 5}',
    '{"event_name": "x", "timestamp": "2024-02-01T10:00:00"}',
    '{"event_name": "x", "timestamp": 0}',
    '{"event_name": "x", "timestamp": 1706781600.5}',
    '{"event_name": "x", "timestamp": "1706781600"}',
    '{"event_name": "x", "timestamp": "2024-02-01 10:00:00Z"}',
])
def test_create_body_wrong_types_rejected(raw):
    with pytest.raises(ValidationError):
        EventCreate.model_validate_json(raw)


def test_create_body_accepts_rfc3339_variants():
    body = EventCreate.model_validate_json(
        '{"event_name": "x", "timestamp": "2024-02-01t17:00:00.123456789+07:00"}'
    )

    assert body.timestamp == datetime(2024, 2, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)


def test_create_body_accepts_datetime_objects():
    stamp = datetime(2024, 2, 1, tzinfo=timezone.utc)

    assert EventCreate(event_name="x", timestamp=stamp).timestamp == stamp

from fastapi import APIRouter, Depends, HTTPException, Query, status
from telemetry.api.deps import get_event_service
from telemetry.api.params import parse_instant, parse_int, parse_int64
from telemetry.core.exceptions import EventNotFound, InvalidEvent, OperationCancelled
from telemetry.schemas.envelope import DataResponse
from telemetry.schemas.event import Event, EventCreate, EventFilter
from telemetry.services.events import EventService
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=DataResponse[Event], status_code=status.HTTP_201_CREATED)
async def create_event(
        request: EventCreate,
        service: EventService = Depends(get_event_service)
):
    """
    Record a single event.

    - **event_name**: required, non-empty
    - **timestamp**: event time, defaults to now (UTC)
    - **payload**: arbitrary JSON object
    """
    try:
        event = await service.create_event(request)
    except InvalidEvent as e:
        logger.info("create_event_invalid", error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error("create_event_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to create event"
        )

    return DataResponse(data=event)


@router.get("", response_model=DataResponse[list[Event]])
async def list_events(
        event_name: str | None = Query(default=None),
        from_time: str | None = Query(default=None, alias="from", description="RFC3339 lower bound"),
        to_time: str | None = Query(default=None, alias="to", description="RFC3339 upper bound"),
        limit: str | None = Query(default=None, description="Page size, 1-1000 (default 100)"),
        offset: str | None = Query(default=None),
        service: EventService = Depends(get_event_service)
):
    """
    List events, newest timestamp first.

    All parameters are optional. Values that cannot be parsed are ignored.
    """
    event_filter = EventFilter(
        event_name=event_name or "",
        from_time=parse_instant(from_time),
        to_time=parse_instant(to_time),
        limit=parse_int(limit, minimum=1) or 0,
        offset=parse_int(offset, minimum=0) or 0
    )

    try:
        events = await service.list_events(event_filter)
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error("list_events_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to list events"
        )

    return DataResponse(data=events)


@router.get("/{event_id}", response_model=DataResponse[Event])
async def get_event(
        event_id: str,
        service: EventService = Depends(get_event_service)
):
    """Fetch one event by id"""
    parsed_id = parse_int64(event_id)
    if parsed_id is None:
        logger.info("get_event_invalid_id", event_id=event_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid event id")

    try:
        event = await service.get_event(parsed_id)
    except EventNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.detail)
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error("get_event_failed", event_id=parsed_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to get event"
        )

    return DataResponse(data=event)

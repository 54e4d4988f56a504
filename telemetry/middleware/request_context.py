from fastapi import Request
import time
import uuid
import structlog

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def client_ip(request: Request) -> str:
    """Originating client address, honouring reverse proxy headers"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


async def request_context_middleware(request: Request, call_next):
    """
    Tag every log line of a request with its id and client address,
    and log one summary line when the response is ready.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        client_ip=client_ip(request),
        method=request.method,
        path=request.url.path
    )

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(
        "request_completed",
        status_code=response.status_code,
        duration_ms=round(duration * 1000, 2)
    )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import structlog

from telemetry.core.config import settings
from telemetry.core.database import dispose_engine
from telemetry.core.exceptions import OperationCancelled
from telemetry.core.logging import configure_logging
from telemetry.api import events, stats
from telemetry.middleware.request_context import request_context_middleware
from telemetry.schemas.envelope import DataResponse, ErrorResponse, HealthStatus

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events"""
    logger.info("application_startup", app_name=settings.app_name)
    yield
    await dispose_engine()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan
)

app.middleware("http")(request_context_middleware)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse(error=message)),
        headers=headers
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Never echo the offending body back to the client
    logger.info("invalid_request_body", errors=len(exc.errors()))
    return error_response(status.HTTP_400_BAD_REQUEST, "invalid request body")


@app.exception_handler(OperationCancelled)
async def cancelled_exception_handler(request: Request, exc: OperationCancelled):
    logger.info("request_cancelled", operation=exc.operation)
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "request cancelled")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", error_type=type(exc).__name__, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


# Include routers
app.include_router(events.router)
app.include_router(stats.router)


@app.get("/health", response_model=DataResponse[HealthStatus])
async def health_check():
    """Health check endpoint"""
    return DataResponse(data=HealthStatus())

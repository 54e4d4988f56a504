import asyncio
import json
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from telemetry.core.config import settings
from telemetry.core.exceptions import OperationCancelled, PersistenceFailure

logger = structlog.get_logger()


class SqlRepository:
    """Base for repositories backed by an async SQLAlchemy session"""

    def __init__(self, db: AsyncSession, timeout: float | None = None):
        self.db = db
        self.timeout = settings.query_timeout_seconds if timeout is None else timeout

    @asynccontextmanager
    async def guard(self, operation: str) -> AsyncIterator[None]:
        """
        Run a storage call under the statement deadline and translate failures.

        Driver errors and undecodable rows become PersistenceFailure, an
        expired deadline becomes OperationCancelled. Task cancellation is
        left alone so it reaches the caller unchanged.
        """
        try:
            async with asyncio.timeout(self.timeout):
                yield
        except TimeoutError as e:
            logger.info("storage_call_cancelled", operation=operation, timeout=self.timeout)
            raise OperationCancelled(operation) from e
        except (SQLAlchemyError, ValidationError, json.JSONDecodeError) as e:
            # Logged by the caller; the message stays internal
            raise PersistenceFailure(operation, f"{operation} failed: {e}") from e

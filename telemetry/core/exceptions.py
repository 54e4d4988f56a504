"""Domain errors shared by the stores, services and request handlers.

Storage driver exceptions never travel past the repositories: they are
wrapped in ``PersistenceFailure`` (or ``OperationCancelled`` when a deadline
is hit) so the HTTP layer only ever deals with the types below.
"""


class TelemetryError(Exception):
    """Base class for all domain errors"""

    message = "telemetry error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class InvalidInput(TelemetryError):
    """Client supplied data that can be corrected and resubmitted"""

    message = "invalid input"


class InvalidEvent(InvalidInput):
    message = "invalid event data"


class NotFound(TelemetryError):
    message = "not found"


class EventNotFound(NotFound):
    message = "event not found"

    def __init__(self, event_id: int):
        super().__init__()
        self.event_id = event_id


class PersistenceFailure(TelemetryError):
    """The storage engine failed (I/O, constraint, serialization)"""

    message = "persistence failure"

    def __init__(self, operation: str, message: str | None = None):
        super().__init__(message or f"{operation} failed")
        self.operation = operation


class OperationCancelled(TelemetryError):
    """A storage call was aborted because its deadline passed"""

    message = "operation cancelled"

    def __init__(self, operation: str):
        super().__init__(f"{operation} cancelled")
        self.operation = operation

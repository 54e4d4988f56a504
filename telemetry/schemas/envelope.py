from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope"""
    data: T


class ErrorResponse(BaseModel):
    """Error envelope"""
    error: str


class HealthStatus(BaseModel):
    status: str = "ok"

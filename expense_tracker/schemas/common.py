"""Response envelope and shared field types."""

from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel

from expense_tracker.timeutil import as_utc

DataT = TypeVar("DataT")

# Aware UTC datetime; naive values are read as UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class APIResponse(BaseModel, Generic[DataT]):
    """Successful response wrapping a single payload."""

    success: bool = True
    data: DataT


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Successful response wrapping one page of results."""

    success: bool = True
    data: list[DataT]
    total: int
    limit: int
    offset: int


class MessageResponse(BaseModel):
    """Successful response carrying only a message."""

    success: bool = True
    message: str


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope rendered by the exception handlers."""

    success: bool = False
    error: str
    details: list[FieldErrorResponse] | None = None

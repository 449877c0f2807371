"""Pydantic schemas for API requests and responses."""

from expense_tracker.schemas.auth import AuthData, LoginRequest, SignupRequest, UserResponse
from expense_tracker.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
)
from expense_tracker.schemas.common import (
    APIResponse,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
)
from expense_tracker.schemas.expense import (
    AnalyticsResponse,
    DateRangeResponse,
    ExpenseCreate,
    ExpenseResponse,
)
from expense_tracker.schemas.extraction import ExtractionRequest
from expense_tracker.schemas.user import UserStatsResponse

__all__ = [
    "APIResponse",
    "PaginatedResponse",
    "MessageResponse",
    "ErrorResponse",
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "AuthData",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryListResponse",
    "ExpenseCreate",
    "ExpenseResponse",
    "DateRangeResponse",
    "AnalyticsResponse",
    "ExtractionRequest",
    "UserStatsResponse",
]

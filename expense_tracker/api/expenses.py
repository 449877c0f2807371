"""Expense API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from expense_tracker.api.dependencies import (
    CurrentIdentity,
    get_analytics_service,
    get_expense_service,
    get_extraction_service,
)
from expense_tracker.schemas.common import APIResponse, MessageResponse, PaginatedResponse
from expense_tracker.schemas.expense import (
    AnalyticsResponse,
    DateRangeResponse,
    ExpenseCreate,
    ExpenseResponse,
)
from expense_tracker.schemas.extraction import ExtractionRequest
from expense_tracker.services.analytics import AnalyticsService
from expense_tracker.services.expenses import ExpenseService
from expense_tracker.services.extraction import ExtractionService
from expense_tracker.validation import (
    DEFAULT_PAGE_SIZE,
    ensure_valid,
    normalize_pagination,
    parse_analytics_window,
    validate_expense,
    validate_extraction,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.post(
    "",
    response_model=APIResponse[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    expense_data: ExpenseCreate,
    identity: CurrentIdentity,
    service: Annotated[ExpenseService, Depends(get_expense_service)],
):
    """Record a new expense for the caller."""
    ensure_valid(validate_expense(expense_data))

    expense = service.create(identity.user_id, expense_data)

    return APIResponse(data=ExpenseResponse.model_validate(expense))


@router.get("", response_model=PaginatedResponse[ExpenseResponse])
def get_expenses(
    identity: CurrentIdentity,
    service: Annotated[ExpenseService, Depends(get_expense_service)],
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
):
    """Get the caller's expenses, most recent first."""
    limit, offset = normalize_pagination(limit, offset)

    expenses, total, limit = service.list_by_owner(identity.user_id, limit, offset)

    return PaginatedResponse(
        data=[ExpenseResponse.model_validate(e) for e in expenses],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/date-range", response_model=APIResponse[DateRangeResponse])
def get_date_range(
    identity: CurrentIdentity,
    service: Annotated[ExpenseService, Depends(get_expense_service)],
):
    """Get the first and last expense dates for the caller."""
    date_range = service.date_range(identity.user_id)

    return APIResponse(data=DateRangeResponse.model_validate(date_range))


@router.get("/analytics", response_model=APIResponse[AnalyticsResponse])
def get_analytics(
    identity: CurrentIdentity,
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    start_date: str | None = None,
    end_date: str | None = None,
):
    """Aggregate the caller's spending between two dates (inclusive)."""
    start, end = parse_analytics_window(start_date, end_date)

    analytics = service.aggregate(identity.user_id, start, end)

    return APIResponse(data=AnalyticsResponse.model_validate(analytics))


@router.post("/extract")
async def extract_expenses(
    request_data: ExtractionRequest,
    identity: CurrentIdentity,
    service: Annotated[ExtractionService, Depends(get_extraction_service)],
):
    """Turn free text into expense candidates via the AI extraction service."""
    ensure_valid(validate_extraction(request_data))

    logger.info(f"Extraction requested by user {identity.user_id}")
    status_code, body = await service.extract(request_data.model_dump())

    return JSONResponse(status_code=status_code, content=body)


@router.get("/{expense_id}", response_model=APIResponse[ExpenseResponse])
def get_expense(
    expense_id: int,
    identity: CurrentIdentity,
    service: Annotated[ExpenseService, Depends(get_expense_service)],
):
    """Get a single expense owned by the caller."""
    expense = service.get_by_id(expense_id, identity.user_id)

    return APIResponse(data=ExpenseResponse.model_validate(expense))


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: int,
    identity: CurrentIdentity,
    service: Annotated[ExpenseService, Depends(get_expense_service)],
):
    """Soft delete an expense owned by the caller."""
    service.delete(expense_id, identity.user_id)

    return MessageResponse(message="Expense deleted successfully")

"""Expense and analytics schemas."""

from pydantic import BaseModel, ConfigDict

from expense_tracker.schemas.category import CategoryResponse
from expense_tracker.schemas.common import UTCDateTime


class ExpenseCreate(BaseModel):
    """Create a new expense.

    Any ``total`` sent by the client is dropped; it is always derived
    from ``unit * per_unit_cost``.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    category_id: int | None = None
    unit: float | None = None
    per_unit_cost: float | None = None
    expense_date: UTCDateTime | None = None


class ExpenseResponse(BaseModel):
    """Expense response with its category."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_id: int
    category: CategoryResponse | None = None
    user_id: int
    unit: float
    per_unit_cost: float
    total: float
    expense_date: UTCDateTime
    created_at: UTCDateTime
    updated_at: UTCDateTime


class DateRangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: UTCDateTime
    end: UTCDateTime


class CategoryExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    category_name: str
    total: float
    count: int


class DailyExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    total: float


class AnalyticsResponse(BaseModel):
    """Aggregated spending over a window."""

    model_config = ConfigDict(from_attributes=True)

    total_expenses: float
    expense_count: int
    by_category: list[CategoryExpenseResponse]
    daily_expenses: list[DailyExpenseResponse]
    average_daily_spend: float
    date_range: DateRangeResponse

"""Analytics engine: spending aggregates over a date window."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from expense_tracker.models.category import Category
from expense_tracker.models.expense import Expense
from expense_tracker.services.expenses import DateRange
from expense_tracker.timeutil import as_utc

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = timedelta(days=1).total_seconds()


@dataclass(frozen=True)
class CategoryTotal:
    category_id: int
    category_name: str
    total: float
    count: int


@dataclass(frozen=True)
class DailyTotal:
    date: str  # YYYY-MM-DD, UTC calendar day
    total: float


@dataclass
class AnalyticsResult:
    total_expenses: float
    expense_count: int
    date_range: DateRange
    by_category: list[CategoryTotal] = field(default_factory=list)
    daily_expenses: list[DailyTotal] = field(default_factory=list)
    average_daily_spend: float = 0.0


def average_daily_spend(total: float, start: datetime, end: datetime) -> float:
    """Total divided by the window length in fractional 24h days.

    Returns 0 for a non-positive window or a zero total.
    """
    days = (end - start).total_seconds() / SECONDS_PER_DAY
    if days <= 0 or total <= 0:
        return 0.0
    return total / days


def _day_key(value: str | date) -> str:
    # SQLite's DATE() yields a string, PostgreSQL's a date
    return value if isinstance(value, str) else value.isoformat()


class AnalyticsService:
    """Aggregates one user's expenses over an inclusive window.

    Callers must pass ``start <= end`` with ``end`` not in the future; the
    HTTP layer checks both. Other inputs are not rejected here and simply
    produce an empty or degenerate result.

    Days are UTC calendar days. The daily series is sparse: days without
    expenses are left out rather than filled with zero.
    """

    def __init__(self, db: Session):
        self.db = db

    def aggregate(self, user_id: int, start: datetime, end: datetime) -> AnalyticsResult:
        start, end = as_utc(start), as_utc(end)
        in_window = and_(
            Expense.user_id == user_id,
            Expense.visible(),
            Expense.expense_date.between(start, end),
        )

        # Totals
        total, count = (
            self.db.query(func.coalesce(func.sum(Expense.total), 0.0), func.count(Expense.id))
            .filter(in_window)
            .one()
        )
        total = float(total or 0.0)

        # Per-category rollup; ties broken by ascending category id
        category_total = func.sum(Expense.total)
        category_rows = (
            self.db.query(
                Category.id,
                Category.name,
                category_total.label("total"),
                func.count(Expense.id).label("count"),
            )
            .select_from(Expense)
            .join(Category, Expense.category_id == Category.id)
            .filter(in_window)
            .group_by(Category.id, Category.name)
            .order_by(category_total.desc(), Category.id.asc())
            .all()
        )

        # Daily series, UTC days
        day = func.date(Expense.expense_date)
        daily_rows = (
            self.db.query(day.label("day"), func.sum(Expense.total).label("total"))
            .filter(in_window)
            .group_by(day)
            .order_by(day)
            .all()
        )

        result = AnalyticsResult(
            total_expenses=total,
            expense_count=count,
            date_range=DateRange(start=start, end=end),
            by_category=[
                CategoryTotal(
                    category_id=category_id,
                    category_name=name,
                    total=float(cat_total),
                    count=cat_count,
                )
                for category_id, name, cat_total, cat_count in category_rows
            ],
            daily_expenses=[
                DailyTotal(date=_day_key(day_value), total=float(day_total))
                for day_value, day_total in daily_rows
            ],
            average_daily_spend=average_daily_spend(total, start, end),
        )

        logger.debug(
            f"Analytics for user {user_id} {start.isoformat()}..{end.isoformat()}: "
            f"{count} expenses, {len(result.by_category)} categories"
        )
        return result

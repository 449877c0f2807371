"""Expense ledger: owner-scoped expense records."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from expense_tracker.errors import NotFoundError
from expense_tracker.models.category import Category
from expense_tracker.models.expense import Expense
from expense_tracker.schemas.expense import ExpenseCreate
from expense_tracker.timeutil import as_utc, utc_now
from expense_tracker.validation import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


class ExpenseService:
    """Service for expense-related operations.

    Every lookup carries the owner in its predicate, so another user's
    expense is indistinguishable from a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: int):
        return self.db.query(Expense).filter(Expense.user_id == user_id, Expense.visible())

    def create(self, user_id: int, data: ExpenseCreate) -> Expense:
        """Record an expense. The total is derived when the row is flushed."""
        category = (
            self.db.query(Category)
            .filter(
                Category.id == data.category_id,
                Category.visible_to(user_id),
                Category.visible(),
            )
            .first()
        )
        if not category:
            raise NotFoundError("Category not found")

        expense = Expense(
            name=data.name.strip(),
            category_id=category.id,
            user_id=user_id,
            unit=data.unit,
            per_unit_cost=data.per_unit_cost,
            expense_date=as_utc(data.expense_date) if data.expense_date else utc_now(),
        )
        self.db.add(expense)
        self.db.commit()

        return self.get_by_id(expense.id, user_id)

    def list_by_owner(
        self, user_id: int, limit: int, offset: int
    ) -> tuple[list[Expense], int, int]:
        """Page through the user's expenses, most recent first.

        Returns (expenses, total count, effective limit).
        """
        limit = min(limit, MAX_PAGE_SIZE)
        total = self._owned(user_id).count()
        expenses = (
            self._owned(user_id)
            .options(joinedload(Expense.category))
            .order_by(Expense.expense_date.desc(), Expense.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return expenses, total, limit

    def get_by_id(self, expense_id: int, user_id: int) -> Expense:
        expense = (
            self._owned(user_id)
            .options(joinedload(Expense.category))
            .filter(Expense.id == expense_id)
            .first()
        )
        if not expense:
            raise NotFoundError("Expense not found")
        return expense

    def delete(self, expense_id: int, user_id: int) -> None:
        """Soft delete an expense owned by the user."""
        expense = self._owned(user_id).filter(Expense.id == expense_id).first()
        if not expense:
            raise NotFoundError("Expense not found")

        expense.soft_delete()
        self.db.commit()
        logger.info(f"User {user_id} deleted expense {expense_id}")

    def date_range(self, user_id: int) -> DateRange:
        """First and last expense dates; the end never lies in the future."""
        first, last = (
            self.db.query(func.min(Expense.expense_date), func.max(Expense.expense_date))
            .filter(Expense.user_id == user_id, Expense.visible())
            .one()
        )
        if first is None:
            raise NotFoundError("No expenses found")

        return DateRange(start=as_utc(first), end=min(as_utc(last), utc_now()))

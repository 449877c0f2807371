"""Expense model."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, event
from sqlalchemy.orm import relationship, validates

from expense_tracker.database import Base
from expense_tracker.models.mixins import SoftDeleteMixin, TimestampMixin
from expense_tracker.timeutil import as_utc


class Expense(Base, TimestampMixin, SoftDeleteMixin):
    """A single expense entry owned by one user."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    unit = Column(Float, nullable=False)
    per_unit_cost = Column(Float, nullable=False)
    # Always unit * per_unit_cost, recomputed on every insert/update
    total = Column(Float, nullable=False)
    expense_date = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    category = relationship("Category", back_populates="expenses")
    user = relationship("User", backref="expenses")

    @validates("expense_date")
    def validate_expense_date(self, key, value):
        # Stored as UTC; SQLite drops the offset on write
        return as_utc(value) if value is not None else value

    def recalculate_total(self) -> None:
        self.total = self.unit * self.per_unit_cost


@event.listens_for(Expense, "before_insert")
@event.listens_for(Expense, "before_update")
def _derive_total(mapper, connection, target: Expense) -> None:
    target.recalculate_total()

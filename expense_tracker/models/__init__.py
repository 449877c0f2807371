"""SQLAlchemy models."""

from expense_tracker.models.category import Category, CategoryOwner, OwnedBy, Shared
from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User

__all__ = [
    "User",
    "Category",
    "CategoryOwner",
    "Shared",
    "OwnedBy",
    "Expense",
]

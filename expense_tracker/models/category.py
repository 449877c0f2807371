"""Category model."""

from dataclasses import dataclass

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, or_
from sqlalchemy.orm import relationship

from expense_tracker.database import Base
from expense_tracker.models.mixins import SoftDeleteMixin, TimestampMixin


@dataclass(frozen=True)
class Shared:
    """Owner of a default category: visible to every user."""


@dataclass(frozen=True)
class OwnedBy:
    """Owner of a custom category: visible to one user only."""

    user_id: int


CategoryOwner = Shared | OwnedBy


class Category(Base, TimestampMixin, SoftDeleteMixin):
    """Category model for grouping expenses.

    A null ``user_id`` marks a shared default category. Code should go
    through :attr:`owner` and :meth:`for_owner` rather than touching
    ``user_id``/``is_default`` directly, so the two columns never disagree.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    is_default = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", backref="categories")
    expenses = relationship("Expense", back_populates="category")

    @classmethod
    def for_owner(cls, owner: CategoryOwner, name: str) -> "Category":
        """Build a category whose columns match the given owner."""
        if isinstance(owner, OwnedBy):
            return cls(name=name, user_id=owner.user_id, is_default=False)
        return cls(name=name, user_id=None, is_default=True)

    @property
    def owner(self) -> CategoryOwner:
        if self.user_id is None:
            return Shared()
        return OwnedBy(self.user_id)

    @classmethod
    def visible_to(cls, user_id: int):
        """Filter clause for categories a user may see: shared ones plus their own."""
        return or_(cls.user_id.is_(None), cls.user_id == user_id)

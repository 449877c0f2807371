"""User administration service."""

import logging
from dataclasses import dataclass

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from expense_tracker.errors import ConflictError, ForbiddenError, NotFoundError
from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User
from expense_tracker.services.auth import get_password_hash
from expense_tracker.validation import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserStats:
    total_expenses: int
    total_spending: float
    categories_used: int


class UserService:
    """Service for user lookups and admin operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self, limit: int, offset: int) -> tuple[list[User], int, int]:
        """Page through active users, newest first."""
        limit = min(limit, MAX_PAGE_SIZE)
        query = self.db.query(User).filter(User.visible())
        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return users, total, limit

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id, User.visible()).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def delete_user(self, user_id: int) -> None:
        """Soft delete a regular user. Admin accounts can never be deleted."""
        user = self.get_user(user_id)
        if user.is_admin:
            raise ForbiddenError("Cannot delete admin user")

        user.soft_delete()
        self.db.commit()
        logger.info(f"Deleted user {user_id}")

    def get_stats(self, user_id: int) -> UserStats:
        """Expense count, total spend and distinct categories used."""
        self.get_user(user_id)

        count, spending, categories = (
            self.db.query(
                func.count(Expense.id),
                func.coalesce(func.sum(Expense.total), 0.0),
                func.count(distinct(Expense.category_id)),
            )
            .filter(Expense.user_id == user_id, Expense.visible())
            .one()
        )
        return UserStats(
            total_expenses=count,
            total_spending=float(spending or 0.0),
            categories_used=categories,
        )

    def create_admin(self, email: str, password: str, name: str) -> User:
        """Create an admin account, or promote the active user with this email.

        Signup never grants admin rights; this is the bootstrap path.
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user and user.is_deleted:
            raise ConflictError("Email belongs to a deleted account")

        if user:
            user.is_admin = True
            logger.info(f"Promoted user {user.id} to admin")
        else:
            user = User(
                email=email,
                password_hash=get_password_hash(password),
                name=name,
                is_admin=True,
            )
            self.db.add(user)

        self.db.commit()
        self.db.refresh(user)
        return user

"""Category catalog: shared defaults plus per-user custom categories."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.errors import NotFoundError
from expense_tracker.models.category import Category, OwnedBy, Shared

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_NAMES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Personal Care",
    "Travel",
    "Other",
]


@dataclass
class SeedResult:
    """Outcome of a default-category seed run."""

    created: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class CategoryService:
    """Service for category-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_visible(self, user_id: int) -> list[Category]:
        """Shared default categories plus the user's own, defaults first."""
        return (
            self.db.query(Category)
            .filter(Category.visible_to(user_id), Category.visible())
            .order_by(Category.is_default.desc(), Category.name, Category.id)
            .all()
        )

    def get_visible(self, category_id: int, user_id: int) -> Category:
        """Get a category the user may see; another user's category is not found."""
        category = (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                Category.visible_to(user_id),
                Category.visible(),
            )
            .first()
        )
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create(self, user_id: int, name: str) -> Category:
        """Create a custom category owned by the user. Never a default."""
        category = Category.for_owner(OwnedBy(user_id), name.strip())
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def seed_defaults(self) -> SeedResult:
        """Create any missing default categories.

        Best-effort and non-transactional: each missing default is committed
        on its own. A failed insert is rolled back, logged and skipped;
        earlier inserts stay committed. Running it again only fills gaps.
        """
        result = SeedResult()
        existing = {
            name
            for (name,) in self.db.query(Category.name)
            .filter(
                Category.user_id.is_(None),
                Category.is_default.is_(True),
                Category.visible(),
            )
            .all()
        }

        for name in DEFAULT_CATEGORY_NAMES:
            if name in existing:
                continue
            self.db.add(Category.for_owner(Shared(), name))
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to seed default category '{name}': {e}")
                result.failed.append(name)
                continue
            result.created.append(name)

        return result

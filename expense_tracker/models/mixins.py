"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func

from expense_tracker.timeutil import utc_now


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Mixin to add soft delete functionality.

    Every query that reads a soft-deletable table filters with
    :meth:`visible` so tombstoned rows never leak into results.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @classmethod
    def visible(cls):
        """Filter clause matching rows that are not soft-deleted."""
        return cls.deleted_at.is_(None)

    @property
    def is_deleted(self) -> bool:
        """Check if the record is soft-deleted."""
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Soft delete the record."""
        self.deleted_at = utc_now()

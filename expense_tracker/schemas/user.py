"""User administration schemas."""

from pydantic import BaseModel, ConfigDict


class UserStatsResponse(BaseModel):
    """Read-only spending statistics for one user."""

    model_config = ConfigDict(from_attributes=True)

    total_expenses: int
    total_spending: float
    categories_used: int

"""Category schemas."""

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.schemas.common import UTCDateTime


class CategoryCreate(BaseModel):
    """Create a new custom category.

    Ownership and the default flag are never read from input.
    """

    name: str | None = Field(None, max_length=100)


class CategoryResponse(BaseModel):
    """Category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    user_id: int | None
    is_default: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class CategoryListResponse(BaseModel):
    """All categories visible to the caller."""

    success: bool = True
    data: list[CategoryResponse]
    count: int

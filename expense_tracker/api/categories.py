"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from expense_tracker.api.dependencies import CurrentIdentity, get_category_service
from expense_tracker.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
)
from expense_tracker.schemas.common import APIResponse
from expense_tracker.services.categories import CategoryService
from expense_tracker.validation import ensure_valid, validate_category

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
def get_categories(
    identity: CurrentIdentity,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get default categories plus the caller's own."""
    categories = service.list_visible(identity.user_id)

    return CategoryListResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        count=len(categories),
    )


@router.get("/{category_id}", response_model=APIResponse[CategoryResponse])
def get_category(
    category_id: int,
    identity: CurrentIdentity,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get a single category visible to the caller."""
    category = service.get_visible(category_id, identity.user_id)

    return APIResponse(data=CategoryResponse.model_validate(category))


@router.post(
    "",
    response_model=APIResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category_data: CategoryCreate,
    identity: CurrentIdentity,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Create a custom category owned by the caller."""
    ensure_valid(validate_category(category_data))

    category = service.create(identity.user_id, category_data.name)

    return APIResponse(data=CategoryResponse.model_validate(category))

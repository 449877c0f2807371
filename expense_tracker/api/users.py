"""User API endpoints. Everything except /me is admin-only."""

from typing import Annotated

from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import CurrentIdentity, get_user_service, require_admin
from expense_tracker.schemas.auth import UserResponse
from expense_tracker.schemas.common import APIResponse, MessageResponse, PaginatedResponse
from expense_tracker.schemas.user import UserStatsResponse
from expense_tracker.services.users import UserService
from expense_tracker.validation import DEFAULT_PAGE_SIZE, normalize_pagination

router = APIRouter(prefix="/api/users", tags=["users"])

admin_router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(require_admin)],
)


@router.get("/me", response_model=APIResponse[UserResponse])
def get_me(
    identity: CurrentIdentity,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get current user information."""
    user = service.get_user(identity.user_id)

    return APIResponse(data=UserResponse.model_validate(user))


@admin_router.get("", response_model=PaginatedResponse[UserResponse])
def get_users(
    service: Annotated[UserService, Depends(get_user_service)],
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
):
    """List all active users."""
    limit, offset = normalize_pagination(limit, offset)

    users, total, limit = service.list_users(limit, offset)

    return PaginatedResponse(
        data=[UserResponse.model_validate(u) for u in users],
        total=total,
        limit=limit,
        offset=offset,
    )


@admin_router.get("/{user_id}", response_model=APIResponse[UserResponse])
def get_user(
    user_id: int,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user by id."""
    user = service.get_user(user_id)

    return APIResponse(data=UserResponse.model_validate(user))


@admin_router.get("/{user_id}/stats", response_model=APIResponse[UserStatsResponse])
def get_user_stats(
    user_id: int,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get spending statistics for a user."""
    stats = service.get_stats(user_id)

    return APIResponse(data=UserStatsResponse.model_validate(stats))


@admin_router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Soft delete a regular user. Admin accounts cannot be deleted."""
    service.delete_user(user_id)

    return MessageResponse(message="User deleted successfully")

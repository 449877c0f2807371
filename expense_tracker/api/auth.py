"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from expense_tracker.api.dependencies import get_auth_service
from expense_tracker.schemas.auth import AuthData, LoginRequest, SignupRequest, UserResponse
from expense_tracker.schemas.common import APIResponse
from expense_tracker.services.auth import AuthService
from expense_tracker.validation import ensure_valid, validate_login, validate_signup

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=APIResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def signup(
    user_data: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    ensure_valid(validate_signup(user_data))

    token, user = service.signup(user_data)

    return APIResponse(data=AuthData(token=token, user=UserResponse.model_validate(user)))


@router.post("/login", response_model=APIResponse[AuthData])
def login(
    credentials: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    ensure_valid(validate_login(credentials))

    token, user = service.login(credentials)

    return APIResponse(data=AuthData(token=token, user=UserResponse.model_validate(user)))

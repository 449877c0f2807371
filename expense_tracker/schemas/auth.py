"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from expense_tracker.schemas.common import UTCDateTime


class SignupRequest(BaseModel):
    """User signup request.

    Presence and length rules live in ``expense_tracker.validation`` so
    that every missing field is reported in one response.
    """

    email: EmailStr | None = None
    password: str | None = Field(None, max_length=128)
    name: str | None = Field(None, max_length=255)


class LoginRequest(BaseModel):
    """User login request."""

    email: EmailStr | None = None
    password: str | None = Field(None, max_length=128)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    is_admin: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class AuthData(BaseModel):
    """Token plus the authenticated user."""

    token: str
    user: UserResponse

"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from expense_tracker.config import Settings
from expense_tracker.database import get_db
from expense_tracker.errors import ForbiddenError, UnauthorizedError
from expense_tracker.services.analytics import AnalyticsService
from expense_tracker.services.auth import AuthService, Identity, decode_access_token
from expense_tracker.services.categories import CategoryService
from expense_tracker.services.expenses import ExpenseService
from expense_tracker.services.extraction import ExtractionService
from expense_tracker.services.users import UserService

# Missing or non-bearer headers are reported through our own error envelope
security = HTTPBearer(auto_error=False)

DbSession = Annotated[Session, Depends(get_db)]


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_current_identity(
    request: Request,
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Identity:
    """Resolve the caller from the bearer token.

    The token claims are authoritative; the identity is also published on
    ``request.state.identity`` for the rest of the request.
    """
    if credentials is None:
        raise UnauthorizedError(
            "Authorization header is required. Use: Authorization: Bearer <token>"
        )

    identity = decode_access_token(credentials.credentials, settings)
    request.state.identity = identity
    return identity


def require_admin(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> Identity:
    """Second gate layered on top of identity resolution."""
    if not identity.is_admin:
        raise ForbiddenError("Admin access required")
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]


def get_auth_service(db: DbSession, settings: AppSettings) -> AuthService:
    return AuthService(db, settings)


def get_category_service(db: DbSession) -> CategoryService:
    return CategoryService(db)


def get_expense_service(db: DbSession) -> ExpenseService:
    return ExpenseService(db)


def get_analytics_service(db: DbSession) -> AnalyticsService:
    return AnalyticsService(db)


def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


def get_extraction_service(settings: AppSettings) -> ExtractionService:
    """Get extraction service instance."""
    return ExtractionService(settings)

"""Application error taxonomy.

Services raise these instead of ``HTTPException`` so that they stay usable
outside a request. ``main.py`` renders every ``AppError`` into the
``{"success": false, "error": ...}`` envelope using ``status_code``.
"""

from dataclasses import asdict, dataclass

from fastapi import status


@dataclass(frozen=True)
class FieldError:
    """A single input problem, keyed by the offending field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class AppError(Exception):
    """Base class for errors with a caller-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, errors: list[FieldError] | None = None):
        self.errors = errors or []
        if message is None and self.errors:
            message = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(message)


class NotFoundError(AppError):
    """Resource absent, or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate unique key."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class ForbiddenError(AppError):
    """Authenticated but not allowed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class InternalError(AppError):
    """Storage or unexpected failure. The message never carries internals."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

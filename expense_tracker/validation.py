"""Input validation run before any domain logic.

Pydantic schemas only parse request shapes and types. The functions here
apply the business rules and return every problem at once as a list of
:class:`FieldError`; callers pass the list to :func:`ensure_valid`.
"""

import math
from datetime import UTC, date, datetime, timedelta

from expense_tracker.errors import FieldError, ValidationError
from expense_tracker.schemas.auth import LoginRequest, SignupRequest
from expense_tracker.schemas.category import CategoryCreate
from expense_tracker.schemas.expense import ExpenseCreate
from expense_tracker.schemas.extraction import ExtractionRequest
from expense_tracker.timeutil import utc_now

MIN_PASSWORD_LENGTH = 6
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
DATE_FORMAT = "%Y-%m-%d"
END_OF_DAY = timedelta(hours=23, minutes=59, seconds=59)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_positive(value: float | None) -> bool:
    # NaN and infinity are rejected along with zero and negatives
    return value is not None and math.isfinite(value) and value > 0


def ensure_valid(errors: list[FieldError]) -> None:
    """Raise a ValidationError carrying all collected problems, if any."""
    if errors:
        raise ValidationError(errors=errors)


def validate_signup(data: SignupRequest) -> list[FieldError]:
    errors = []
    if data.email is None:
        errors.append(FieldError("email", "is required"))
    if _is_blank(data.password):
        errors.append(FieldError("password", "is required"))
    elif len(data.password) < MIN_PASSWORD_LENGTH:
        errors.append(
            FieldError("password", f"must be at least {MIN_PASSWORD_LENGTH} characters")
        )
    if _is_blank(data.name):
        errors.append(FieldError("name", "is required"))
    return errors


def validate_login(data: LoginRequest) -> list[FieldError]:
    errors = []
    if data.email is None:
        errors.append(FieldError("email", "is required"))
    if _is_blank(data.password):
        errors.append(FieldError("password", "is required"))
    return errors


def validate_category(data: CategoryCreate) -> list[FieldError]:
    if _is_blank(data.name):
        return [FieldError("name", "is required")]
    return []


def validate_expense(data: ExpenseCreate) -> list[FieldError]:
    errors = []
    if _is_blank(data.name):
        errors.append(FieldError("name", "is required"))
    if data.category_id is None or data.category_id <= 0:
        errors.append(FieldError("category_id", "is required"))
    if not _is_positive(data.unit):
        errors.append(FieldError("unit", "must be greater than 0"))
    if not _is_positive(data.per_unit_cost):
        errors.append(FieldError("per_unit_cost", "must be greater than 0"))
    return errors


def validate_extraction(data: ExtractionRequest) -> list[FieldError]:
    if _is_blank(data.input_data.paragraph):
        return [FieldError("input_data.paragraph", "is required")]
    return []


def normalize_pagination(limit: int, offset: int) -> tuple[int, int]:
    """Check pagination parameters and clamp the limit to MAX_PAGE_SIZE."""
    errors = []
    if limit < 1:
        errors.append(FieldError("limit", "must be at least 1"))
    if offset < 0:
        errors.append(FieldError("offset", "must not be negative"))
    ensure_valid(errors)
    return min(limit, MAX_PAGE_SIZE), offset


def _parse_day(field: str, value: str | None, errors: list[FieldError]) -> date | None:
    if _is_blank(value):
        errors.append(FieldError(field, "is required (format: YYYY-MM-DD)"))
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        errors.append(FieldError(field, "invalid format (use YYYY-MM-DD)"))
        return None


def parse_analytics_window(
    start_date: str | None,
    end_date: str | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Turn ``YYYY-MM-DD`` query values into an inclusive UTC window.

    The start is midnight UTC of ``start_date``; the end is 23:59:59 UTC of
    ``end_date``. An end date after today is rejected. When the window ends
    today its end is clamped to ``now`` so the window never reaches into
    the future. Expenses dated later today than ``now`` therefore fall
    outside the window until that time has passed.
    """
    now = now or utc_now()
    errors: list[FieldError] = []
    start_day = _parse_day("start_date", start_date, errors)
    end_day = _parse_day("end_date", end_date, errors)
    ensure_valid(errors)

    start = datetime(start_day.year, start_day.month, start_day.day, tzinfo=UTC)
    end = datetime(end_day.year, end_day.month, end_day.day, tzinfo=UTC) + END_OF_DAY

    if end < start:
        raise ValidationError(errors=[FieldError("end_date", "must be after start_date")])
    if end_day > now.astimezone(UTC).date():
        raise ValidationError(errors=[FieldError("end_date", "cannot be in the future")])

    return start, min(end, now)

"""Authentication service for JWT and password handling."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from expense_tracker.config import Settings, get_settings
from expense_tracker.errors import ConflictError, InternalError, UnauthorizedError
from expense_tracker.models.user import User
from expense_tracker.schemas.auth import LoginRequest, SignupRequest
from expense_tracker.timeutil import utc_now

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    """Caller identity taken from a validated token."""

    user_id: int
    is_admin: bool


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, is_admin: bool, settings: Settings | None = None) -> str:
    """Create a signed JWT binding the user id and admin flag."""
    settings = settings or get_settings()
    expire = utc_now() + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "is_admin": is_admin,
        "exp": expire,
    }
    try:
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    except JWTError as e:
        logger.error(f"Failed to sign token for user {user_id}: {e}")
        raise InternalError("Failed to generate token") from e


def decode_access_token(token: str, settings: Settings | None = None) -> Identity:
    """Validate a JWT and return the identity it carries.

    The claims are trusted as-is; no database lookup happens here.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info(f"Rejected token: {e}")
        raise UnauthorizedError("Invalid or expired token") from e

    subject = payload.get("sub")
    is_admin = payload.get("is_admin")
    if not isinstance(subject, str) or not subject.isdigit() or not isinstance(is_admin, bool):
        raise UnauthorizedError("Invalid or expired token")

    return Identity(user_id=int(subject), is_admin=is_admin)


class AuthService:
    """Signup and login against the user table."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def get_user_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        query = self.db.query(User).filter(User.email == email)
        if not include_deleted:
            query = query.filter(User.visible())
        return query.first()

    def signup(self, data: SignupRequest) -> tuple[str, User]:
        """Register a regular user and return a token for them."""
        # Soft-deleted accounts keep their email reserved
        if self.get_user_by_email(data.email, include_deleted=True):
            raise ConflictError("User with this email already exists")

        user = User(
            email=data.email,
            password_hash=get_password_hash(data.password),
            name=data.name.strip(),
            is_admin=False,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User with this email already exists") from e
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return create_access_token(user.id, user.is_admin, self.settings), user

    def login(self, data: LoginRequest) -> tuple[str, User]:
        """Authenticate by email and password."""
        user = self.get_user_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning("Failed login attempt")
            raise UnauthorizedError("Invalid email or password")

        return create_access_token(user.id, user.is_admin, self.settings), user

"""Pytest configuration and fixtures."""

import os
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from expense_tracker.config import Settings
from expense_tracker.database import Base, create_db_engine, create_session_factory, get_db
from expense_tracker.main import create_app
from expense_tracker.models import Category, Expense, OwnedBy, Shared, User
from expense_tracker.services.users import UserService


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# PostgreSQL when TEST_DATABASE_URL is set, SQLite file otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = create_session_factory(engine)

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - each test cleans up after itself


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def app():
    return create_app(engine=engine)


def open_client(app, db):
    """Test client whose requests share the test session."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture(scope="function")
def client(app, db):
    """Create a test client with database override.

    Startup runs the default category seed against the test engine.
    """
    with open_client(app, db) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_settings(db):
    """Factory for a client around an app built with the given settings."""
    apps = []

    def _client_with_settings(settings: Settings) -> TestClient:
        app = create_app(settings=settings, engine=engine)
        apps.append(app)
        return open_client(app, db)

    yield _client_with_settings
    for app in apps:
        app.dependency_overrides.clear()


def signup(client, email: str, name: str = "Test User", password: str = TEST_PASSWORD):
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return signup(client, "other@example.com", name="Other User")


@pytest.fixture
def admin_headers(client, db):
    """Create an admin through the bootstrap path and log in."""
    admin = UserService(db).create_admin("admin@example.com", TEST_PASSWORD, "Admin")
    response = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, response.text
    token = response.json()["data"]["token"]
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=admin.id, email=admin.email)


@pytest.fixture
def default_category_id(client, auth_headers):
    """Id of a seeded default category."""
    response = client.get("/api/categories", headers=auth_headers)
    defaults = [c for c in response.json()["data"] if c["is_default"]]
    return defaults[0]["id"]


@pytest.fixture
def make_user(db):
    """Factory inserting users directly, bypassing the API."""

    def _make_user(email: str, is_admin: bool = False) -> User:
        user = User(email=email, name=email.split("@")[0], password_hash="fake", is_admin=is_admin)
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_category(db):
    """Factory for categories; pass no user for a shared default."""

    def _make_category(name: str, user: User | None = None) -> Category:
        owner = OwnedBy(user.id) if user else Shared()
        category = Category.for_owner(owner, name)
        db.add(category)
        db.commit()
        return category

    return _make_category


@pytest.fixture
def make_expense(db):
    """Factory for expenses at a given instant."""

    def _make_expense(
        user: User,
        category: Category,
        per_unit_cost: float,
        expense_date: datetime,
        unit: float = 1,
        name: str = "Expense",
    ) -> Expense:
        expense = Expense(
            name=name,
            user_id=user.id,
            category_id=category.id,
            unit=unit,
            per_unit_cost=per_unit_cost,
            expense_date=expense_date,
        )
        db.add(expense)
        db.commit()
        return expense

    return _make_expense

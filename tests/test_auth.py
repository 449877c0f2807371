"""Tests for token issuance, validation and the admin gate."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from expense_tracker.api.dependencies import require_admin
from expense_tracker.config import Settings, get_settings
from expense_tracker.errors import ForbiddenError, UnauthorizedError
from expense_tracker.services.auth import (
    Identity,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from expense_tracker.timeutil import utc_now

settings = get_settings()


def _encode(claims: dict, secret: str | None = None, algorithm: str = "HS256") -> str:
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm=algorithm)


def test_token_round_trip():
    """Test that issued tokens decode to the same identity."""
    token = create_access_token(42, True)
    assert decode_access_token(token) == Identity(user_id=42, is_admin=True)


def test_token_expires_after_seven_days():
    """Test that the expiry claim is seven days out."""
    token = create_access_token(1, False)
    claims = jwt.get_unverified_claims(token)
    remaining = claims["exp"] - utc_now().timestamp()
    assert timedelta(days=7).total_seconds() - 60 < remaining <= timedelta(days=7).total_seconds()


def test_expired_token_rejected():
    """Test that an expired token is unauthorized."""
    token = _encode({"sub": "1", "is_admin": False, "exp": utc_now() - timedelta(seconds=1)})
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_wrong_secret_rejected():
    """Test that a token signed with another secret is unauthorized."""
    token = _encode(
        {"sub": "1", "is_admin": False, "exp": utc_now() + timedelta(hours=1)},
        secret="someone-elses-secret",
    )
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_unexpected_algorithm_rejected():
    """Test that a token signed with a different algorithm is unauthorized."""
    token = _encode(
        {"sub": "1", "is_admin": True, "exp": utc_now() + timedelta(hours=1)},
        algorithm="HS512",
    )
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


@pytest.mark.parametrize(
    "claims",
    [
        {"is_admin": False},
        {"sub": "1"},
        {"sub": "abc", "is_admin": False},
        {"sub": "1", "is_admin": "yes"},
    ],
)
def test_incomplete_claims_rejected(claims):
    """Test that tokens missing usable identity claims are unauthorized."""
    token = _encode({**claims, "exp": utc_now() + timedelta(hours=1)})
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_password_hashing():
    """Test that password hashes verify only the original password."""
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_require_admin_gate():
    """Test that the admin gate only checks the role claim."""
    admin = Identity(user_id=1, is_admin=True)
    assert require_admin(admin) is admin

    with pytest.raises(ForbiddenError):
        require_admin(Identity(user_id=2, is_admin=False))


def test_token_claims_are_authoritative(client, make_user):
    """Test that authorization trusts the token without a database lookup.

    A token claiming admin for a user stored as non-admin still passes the
    admin gate.
    """
    user = make_user("claims@example.com")
    token = create_access_token(user.id, True)

    response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_expired_token_over_http(client):
    """Test that an expired token is rejected by the API."""
    token = _encode({"sub": "1", "is_admin": False, "exp": utc_now() - timedelta(minutes=5)})
    response = client.get("/api/expenses", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"



def test_tokens_follow_app_settings(client_with_settings):
    """Test that an app built with its own settings signs and verifies with them."""
    app_settings = Settings(jwt_secret="app-specific-secret", jwt_expiration_minutes=30)

    with client_with_settings(app_settings) as custom:
        response = custom.post(
            "/api/auth/signup",
            json={"email": "custom@example.com", "password": "password123", "name": "Custom"},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        token = data["token"]

        claims = jwt.decode(token, "app-specific-secret", algorithms=["HS256"])
        assert claims["sub"] == str(data["user"]["id"])
        assert claims["exp"] - utc_now().timestamp() <= timedelta(minutes=30).total_seconds()

        response = custom.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

        # Signed with the process-wide default secret
        foreign = create_access_token(data["user"]["id"], False)
        response = custom.get("/api/users/me", headers={"Authorization": f"Bearer {foreign}"})
        assert response.status_code == 401

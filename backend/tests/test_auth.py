import pytest
from fastapi import status

from conftest import auth_header
from project_catalog.repositories import UserRepository


def test_register_user(client):
    """Test user registration"""
    response = client.post(
        "/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert "access_token" in body
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert "hashed_password" not in body["user"]


def test_register_duplicate_email(client, register):
    """Test registration with duplicate email"""
    register("alice", email="shared@example.com")

    response = client.post(
        "/auth/register",
        json={"username": "alice2", "email": "shared@example.com", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username or email already exists"


def test_register_duplicate_username(client, register):
    register("alice")

    response = client.post(
        "/auth/register",
        json={"username": "alice", "email": "other@example.com", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.parametrize("payload, detail", [
    ({"email": "a@example.com", "password": "secret123"}, "Username, email, and password are required"),
    ({"username": "al", "email": "a@example.com", "password": "secret123"}, "Username must be at least 3 characters"),
    ({"username": "alice", "email": "a@example.com", "password": "12345"}, "Password must be at least 6 characters"),
    ({"username": "alice", "email": "not-an-email", "password": "secret123"}, "Invalid email format"),
])
def test_register_invalid_input(client, payload, detail):
    response = client.post("/auth/register", json=payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == detail


def test_login_with_email(client, register):
    """Test user login"""
    register("alice")

    response = client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert "access_token" in response.json()
    assert response.json()["user"]["username"] == "alice"


def test_login_with_username(client, register):
    register("alice")

    response = client.post(
        "/auth/login",
        json={"username": "alice", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["email"] == "alice@example.com"


def test_login_invalid_credentials(client, register):
    """Test login with invalid credentials"""
    register("alice")

    wrong_password = client.post(
        "/auth/login",
        json={"email": "alice@example.com", "password": "wrongpassword"}
    )
    unknown_user = client.post(
        "/auth/login",
        json={"email": "nobody@example.com", "password": "secret123"}
    )
    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_user.status_code == status.HTTP_401_UNAUTHORIZED
    # Unknown user and wrong password are indistinguishable
    assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid credentials"}


def test_login_missing_fields(client):
    response = client.post("/auth/login", json={"email": "alice@example.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_me(client, register):
    body = register("alice")

    response = client.get("/auth/me", headers=auth_header(body["access_token"]))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == body["user"]["id"]
    assert response.json()["username"] == "alice"


def test_me_without_token(client):
    response = client.get("/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Missing token"
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_with_garbage_token(client):
    response = client.get("/auth/me", headers=auth_header("not.a.jwt"))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid token"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_race_is_conflict(client, register, monkeypatch):
    register("alice")
    # Skip the friendly pre-check so the UNIQUE constraint has to catch the duplicate
    monkeypatch.setattr(UserRepository, "get_by_email_or_username", lambda self, email, username: None)

    response = client.post(
        "/auth/register",
        json={"username": "alice", "email": "alice2@example.com", "password": "secret123"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username or email already exists"

    # The session is usable again after the rollback
    login = client.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert login.status_code == status.HTTP_200_OK

from datetime import timedelta

import pytest
from jose import jwt

from project_catalog.config import settings
from project_catalog.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from project_catalog.exceptions import AuthenticationError


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_password_hash_uses_configured_rounds():
    assert get_password_hash("secret123").startswith(f"$2b${settings.bcrypt_rounds:02d}$")
    assert get_password_hash("secret123", rounds=5).startswith("$2b$05$")


def test_long_passwords_are_truncated_not_rejected():
    password = "x" * 100
    hashed = get_password_hash(password)
    assert verify_password(password, hashed)
    assert verify_password("x" * 72, hashed)


def test_verify_password_with_malformed_hash():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_decode_returns_claims():
    token = create_access_token({"sub": "7", "username": "alice", "email": "alice@example.com"})
    claims = decode_access_token(token)
    assert claims.user_id == 7
    assert claims.username == "alice"
    assert claims.email == "alice@example.com"


def test_expired_token_is_rejected():
    token = create_access_token(
        {"sub": "7", "username": "alice", "email": "alice@example.com"},
        expires_delta=timedelta(seconds=-1),
    )
    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.detail == "Invalid token"


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode(
        {"sub": "7", "username": "alice", "email": "alice@example.com"},
        "some-other-secret",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_token_without_identity_claims_is_rejected():
    token = create_access_token({"sub": "7"})
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token):
    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.detail == "Missing token"
    assert exc_info.value.status_code == 401

"""Token and password helpers."""

from datetime import timedelta

from jose import jwt

from app.config import settings
from app.core.security import (
    create_access_token,
    create_oauth_state,
    decode_token,
    get_password_hash,
    read_oauth_state,
    verify_password,
    verify_token,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong-password", hashed)


def test_access_token_carries_subject_and_expiry():
    token = create_access_token({"sub": "abc123", "email": "a@x.com", "role": "DOCTOR"})
    payload = decode_token(token)

    assert payload["sub"] == "abc123"
    assert payload["email"] == "a@x.com"
    assert payload["role"] == "DOCTOR"
    assert "exp" in payload
    assert verify_token(token) == "abc123"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "abc123"}, expires_delta=timedelta(seconds=-1))

    assert decode_token(token) is None
    assert verify_token(token) is None


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "abc123"}, "some-other-key", algorithm=settings.JWT_ALGORITHM)

    assert verify_token(token) is None


def test_garbage_token_is_rejected():
    assert verify_token("not-a-jwt") is None


def test_token_without_subject_is_rejected():
    token = create_access_token({"email": "a@x.com"})

    assert verify_token(token) is None


def test_oauth_state_is_not_an_access_token():
    state = create_oauth_state("abc123")

    assert read_oauth_state(state) == "abc123"
    assert verify_token(state) is None


def test_access_token_is_not_an_oauth_state():
    token = create_access_token({"sub": "abc123"})

    assert read_oauth_state(token) is None

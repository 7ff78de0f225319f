from datetime import timedelta

import pytest

from app.features.auth.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify_password():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_long_passwords_are_not_truncated():
    base = "x" * 80
    hashed = hash_password(base + "a")
    assert not verify_password(base + "b", hashed)


def test_access_token_roundtrip():
    token = create_access_token({"sub": "7", "username": "jdoe"})
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["username"] == "jdoe"
    assert "exp" in payload


def test_expired_token_rejected():
    token = create_access_token({"sub": "7"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(ValueError, match="expired"):
        decode_access_token(token)


def test_garbage_token_rejected():
    with pytest.raises(ValueError, match="Invalid token"):
        decode_access_token("not-a-jwt")

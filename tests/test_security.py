"""Tests for password hashing and session tokens."""

from support_network_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_is_salted():
    first = hash_password("secret")
    second = hash_password("secret")
    assert first != second
    assert verify_password("secret", first)
    assert verify_password("secret", second)
    assert not verify_password("Secret", first)


def test_malformed_hash_never_verifies():
    assert not verify_password("secret", "not-a-hash")


def test_token_carries_subject():
    token = create_access_token({"sub": "42"})
    payload = decode_access_token(token)
    assert payload["sub"] == "42"
    assert "exp" in payload


def test_tampered_token_is_rejected():
    header, payload, signature = create_access_token({"sub": "42"}).split(".")
    forged = create_access_token({"sub": "1"}).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token("garbage") is None


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "42"}, expires_delta=-10)
    assert decode_access_token(token) is None

from __future__ import annotations

import pytest
from jose import jwt

from app.core import config as app_config
from app.core.security import create_session_token, decode_session_token, read_session_claims


def test_session_token_carries_projected_claims():
    token, expires = create_session_token({"sub": "u1", "id": "u1", "role": "admin", "name": None})

    payload = decode_session_token(token)
    assert payload["sub"] == "u1"
    assert payload["role"] == "admin"
    assert "name" not in payload
    assert payload["exp"] == int(expires.timestamp())
    assert payload["exp"] - payload["iat"] == app_config.settings.SESSION_MAX_AGE_SECONDS


def test_reissue_replaces_reserved_claims():
    first, _ = create_session_token({"sub": "u1"})
    claims = decode_session_token(first)

    second, _ = create_session_token(claims)

    assert decode_session_token(second)["jti"] != claims["jti"]


def test_expired_token_is_rejected():
    app_config.settings.SESSION_MAX_AGE_SECONDS = -60
    token, _ = create_session_token({"sub": "u1"})

    assert read_session_claims(token) is None


def test_token_signed_with_other_secret_is_rejected():
    forged = jwt.encode({"sub": "u1", "role": "admin"}, "not-the-secret", algorithm="HS256")

    assert read_session_claims(forged) is None


def test_token_without_subject_is_rejected():
    token, _ = create_session_token({"role": "admin"})

    assert read_session_claims(token) is None


def test_missing_token_is_none():
    assert read_session_claims(None) is None
    assert read_session_claims("") is None


def test_signing_requires_secret():
    app_config.settings.AUTH_SECRET = ""

    with pytest.raises(RuntimeError, match="AUTH_SECRET"):
        create_session_token({"sub": "u1"})

# app/core/security.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import settings

# Claims owned by the token itself; callbacks cannot override them.
_RESERVED_CLAIMS = frozenset({"iat", "exp", "jti"})


# -------------------------
# JWT helpers
# -------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require_auth_secret() -> None:
    if not settings.AUTH_SECRET or not settings.AUTH_SECRET.strip():
        raise RuntimeError("AUTH_SECRET must be set (sessions are signed).")


def session_expiry(now: datetime | None = None) -> datetime:
    now = now or _now_utc()
    return now + timedelta(seconds=int(settings.SESSION_MAX_AGE_SECONDS))


def create_session_token(claims: dict[str, Any]) -> tuple[str, datetime]:
    """
    Sign the session claim set.

    Returns the encoded token and its expiry. A fresh ``iat``/``exp``/``jti`` is
    stamped on every call, so re-encoding an existing claim set extends it.
    """
    _require_auth_secret()

    now = _now_utc()
    exp = session_expiry(now)

    payload = {k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS and v is not None}
    payload.update(
        {
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid.uuid4().hex,
        }
    )

    token = jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, exp


def decode_session_token(token: str) -> dict[str, Any]:
    _require_auth_secret()
    # Let callers decide how to handle JWTError
    return jwt.decode(token, settings.AUTH_SECRET, algorithms=[settings.JWT_ALGORITHM])


def read_session_claims(token: str | None) -> dict[str, Any] | None:
    """Return verified claims, or None for a missing, expired or tampered token."""
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload

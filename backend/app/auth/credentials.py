# app/auth/credentials.py
"""
Email/password authorization against Supabase.

``authorize`` is the credentials provider callback: it returns the user's
profile row on success and ``None`` on any failure. Callers that need to know
*why* a sign-in failed (logging, metrics) use ``authorize_detailed``; the HTTP
layer deliberately reports every failure the same way.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.services.supabase_client import (
    NETWORK_ERROR_CODE,
    PROFILE_NOT_FOUND_CODE,
    SupabaseClientError,
    supabase_fetch_profile,
    supabase_sign_in_with_password,
)

logger = logging.getLogger(__name__)

# Supabase Auth codes that mean "the user got it wrong" rather than "the service is unhealthy".
_CREDENTIAL_ERROR_CODES = frozenset(
    {
        "invalid_credentials",
        "email_not_confirmed",
        "user_not_found",
        "user_banned",
        "validation_failed",
        "AuthApiError",
    }
)


class AuthFailure(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_CREDENTIALS = "invalid_credentials"
    IDENTITY_SERVICE_ERROR = "identity_service_error"
    MISSING_IDENTITY = "missing_identity"
    PROFILE_NOT_FOUND = "profile_not_found"
    PROFILE_LOOKUP_ERROR = "profile_lookup_error"


@dataclass(frozen=True)
class AuthorizeResult:
    profile: dict[str, Any] | None = None
    failure: AuthFailure | None = None

    @classmethod
    def failed(cls, failure: AuthFailure) -> AuthorizeResult:
        return cls(profile=None, failure=failure)


def _classify_sign_in_error(exc: SupabaseClientError) -> AuthFailure:
    if exc.code == NETWORK_ERROR_CODE:
        return AuthFailure.IDENTITY_SERVICE_ERROR
    if exc.code in _CREDENTIAL_ERROR_CODES:
        return AuthFailure.INVALID_CREDENTIALS
    if exc.status is not None and 400 <= int(exc.status) < 500 and exc.status != 429:
        return AuthFailure.INVALID_CREDENTIALS
    return AuthFailure.IDENTITY_SERVICE_ERROR


def _field(credentials: Mapping[str, Any] | None, name: str) -> str:
    if not credentials:
        return ""
    value = credentials.get(name)
    return value if isinstance(value, str) else ""


def authorize_detailed(credentials: Mapping[str, Any] | None) -> AuthorizeResult:
    email = _field(credentials, "email")
    password = _field(credentials, "password")
    if not email or not password:
        return AuthorizeResult.failed(AuthFailure.MISSING_CREDENTIALS)

    try:
        identity = supabase_sign_in_with_password(email, password)
    except SupabaseClientError as exc:
        failure = _classify_sign_in_error(exc)
        if failure is AuthFailure.INVALID_CREDENTIALS:
            logger.warning("Supabase sign-in rejected: code=%s message=%s", exc.code, exc.message)
        else:
            logger.error("Supabase sign-in error: code=%s message=%s", exc.code, exc.message)
        return AuthorizeResult.failed(failure)
    except Exception:
        # Misconfiguration or an unexpected library response still counts as a failed sign-in.
        logger.exception("Unexpected error during Supabase sign-in")
        return AuthorizeResult.failed(AuthFailure.IDENTITY_SERVICE_ERROR)

    if not identity or not identity.get("id"):
        logger.warning("Supabase sign-in returned no user")
        return AuthorizeResult.failed(AuthFailure.MISSING_IDENTITY)

    try:
        profile = supabase_fetch_profile(identity["id"])
    except SupabaseClientError as exc:
        logger.error(
            "Error fetching user profile: user_id=%s code=%s message=%s",
            identity["id"],
            exc.code,
            exc.message,
        )
        if exc.code == PROFILE_NOT_FOUND_CODE:
            return AuthorizeResult.failed(AuthFailure.PROFILE_NOT_FOUND)
        return AuthorizeResult.failed(AuthFailure.PROFILE_LOOKUP_ERROR)
    except Exception:
        logger.exception("Unexpected error fetching user profile: user_id=%s", identity["id"])
        return AuthorizeResult.failed(AuthFailure.PROFILE_LOOKUP_ERROR)

    return AuthorizeResult(profile=profile)


def authorize(credentials: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return the profile row for valid credentials, otherwise None."""
    return authorize_detailed(credentials).profile

"""
Wrapper around the supabase-py auth and PostgREST APIs.

Provides a stable, exception-friendly interface for the authenticator to call
without leaking supabase/gotrue/postgrest-specific errors up the stack.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import httpx
from supabase import AuthError, Client, PostgrestAPIError, create_client
from supabase._sync.client import SupabaseException
from supabase.lib.client_options import ClientOptions

from app.core.config import settings

logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching zero (or many) rows.
PROFILE_NOT_FOUND_CODE = "PGRST116"
NETWORK_ERROR_CODE = "network_error"
CLIENT_ERROR_CODE = "client_error"


class SupabaseClientError(Exception):
    """Raised when Supabase returns an error."""

    def __init__(self, code: str, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status = status

    @property
    def message(self) -> str:
        return self.args[0]


def _require_supabase_config() -> None:
    if not settings.SUPABASE_URL:
        raise RuntimeError("SUPABASE_URL is not configured")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_ROLE_KEY is not configured")


def _client_options() -> ClientOptions:
    # Server-side clients never keep a user session around between calls.
    return ClientOptions(auto_refresh_token=False, persist_session=False)


def _new_auth_client() -> Client:
    """
    A signed-in supabase client switches its PostgREST auth to the user's token,
    so every sign-in attempt gets its own short-lived client.
    """
    _require_supabase_config()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, options=_client_options())


@lru_cache(maxsize=1)
def _get_admin_client() -> Client:
    _require_supabase_config()
    logger.info("Initialized Supabase service-role client for %s", settings.SUPABASE_URL)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, options=_client_options())


def reset_clients() -> None:
    """Drop the cached service-role client (used after settings change)."""
    _get_admin_client.cache_clear()


def _translate_auth_error(exc: AuthError) -> SupabaseClientError:
    code = getattr(exc, "code", None) or type(exc).__name__
    message = getattr(exc, "message", None) or str(exc)
    status = getattr(exc, "status", None)
    return SupabaseClientError(code=str(code), message=str(message), status=status)


def _translate_postgrest_error(exc: PostgrestAPIError) -> SupabaseClientError:
    code = getattr(exc, "code", None) or "PostgrestAPIError"
    message = getattr(exc, "message", None) or str(exc)
    return SupabaseClientError(code=str(code), message=str(message))


def _translate_network_error(exc: httpx.HTTPError) -> SupabaseClientError:
    return SupabaseClientError(code=NETWORK_ERROR_CODE, message=str(exc) or type(exc).__name__)


def _client_or_raise(factory) -> Client:
    # create_client validates the URL and key format and raises SupabaseException.
    try:
        return factory()
    except SupabaseException as exc:
        raise SupabaseClientError(code=CLIENT_ERROR_CODE, message=str(exc)) from exc


def _user_to_dict(user: Any) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "email": getattr(user, "email", None),
        "user_metadata": dict(getattr(user, "user_metadata", None) or {}),
    }


def supabase_sign_in_with_password(email: str, password: str) -> dict[str, Any] | None:
    """
    Verify email/password against Supabase Auth.

    Returns the identity (``id``, ``email``, ``user_metadata``), or None when the
    service answered without a user.
    """
    client = _client_or_raise(_new_auth_client)
    try:
        resp = client.auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as exc:
        raise _translate_auth_error(exc) from exc
    except httpx.HTTPError as exc:
        raise _translate_network_error(exc) from exc

    user = getattr(resp, "user", None)
    if user is None:
        return None
    return _user_to_dict(user)


def supabase_fetch_profile(user_id: str, table: str | None = None) -> dict[str, Any]:
    """Fetch exactly one profile row by id. Zero rows raises with code PGRST116."""
    client = _client_or_raise(_get_admin_client)
    try:
        resp = (
            client.table(table or settings.PROFILE_TABLE)
            .select("*")
            .eq("id", user_id)
            .single()
            .execute()
        )
    except PostgrestAPIError as exc:
        raise _translate_postgrest_error(exc) from exc
    except httpx.HTTPError as exc:
        raise _translate_network_error(exc) from exc

    row = getattr(resp, "data", None)
    if not isinstance(row, dict):
        raise SupabaseClientError(code=PROFILE_NOT_FOUND_CODE, message="Profile row not found")
    return row

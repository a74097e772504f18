# app/dependencies/auth.py
from __future__ import annotations

from fastapi import Request

from app.auth.identity import Identity
from app.core.security import read_session_claims
from app.services.session_cookies import read_session_cookie


class SignInRequired(Exception):
    """Raised by protected routes when the request has no valid session."""

    def __init__(self, callback_url: str) -> None:
        super().__init__("Sign in required")
        self.callback_url = callback_url


def get_optional_identity(request: Request) -> Identity:
    """Validates the session cookie (signature + exp). Never raises."""
    claims = read_session_claims(read_session_cookie(request))
    return Identity.from_session_claims(claims) if claims else Identity.unauthenticated()


def require_identity(request: Request) -> Identity:
    identity = get_optional_identity(request)
    if not identity.is_authenticated:
        callback_url = request.url.path
        if request.url.query:
            callback_url = f"{callback_url}?{request.url.query}"
        raise SignInRequired(callback_url)
    return identity

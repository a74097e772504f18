# app/routes/auth.py
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode, urlsplit

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse

from app.auth.options import AuthOptions, get_auth_options
from app.auth.session import build_session, initial_token_claims
from app.core.security import create_session_token, read_session_claims
from app.schemas.auth import (
    CredentialsIn,
    MessageOut,
    ProviderOut,
    SessionOut,
    SessionUserOut,
    SignInOut,
)
from app.services.session_cookies import (
    clear_session_cookie,
    read_session_cookie,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

AUTH_BASE_PATH = "/api/auth"

router = APIRouter(prefix=AUTH_BASE_PATH, tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


# -----------------------------
# Helpers
# -----------------------------
def safe_callback_url(url: str | None, request: Request) -> str:
    """Only allow relative paths or absolute URLs on this host; anything else becomes "/"."""
    if not url:
        return "/"
    url = url.strip()
    if url.startswith("/") and not url.startswith("//"):
        return url
    parts = urlsplit(url)
    if parts.scheme in {"http", "https"} and parts.netloc == request.url.netloc:
        return url
    return "/"


def _session_user_out(session_user: dict[str, Any] | None) -> SessionUserOut | None:
    if session_user is None:
        return None
    user_id = session_user.get("id")
    role = session_user.get("role")
    return SessionUserOut(
        id=str(user_id) if user_id is not None else None,
        role=str(role) if role is not None else None,
        name=session_user.get("name"),
        email=session_user.get("email"),
        image=session_user.get("image"),
    )


# -----------------------------
# Routes
# -----------------------------
@router.get("/providers", response_model=dict[str, ProviderOut])
def list_providers(options: AuthOptions = Depends(get_auth_options)):
    return {p.id: p.describe(AUTH_BASE_PATH) for p in options.providers}


@router.get("/signin")
def sign_in_page(request: Request, callbackUrl: str | None = None, options: AuthOptions = Depends(get_auth_options)):  # noqa: N803
    target = options.sign_in_page
    if callbackUrl:
        target = f"{target}?{urlencode({'callbackUrl': safe_callback_url(callbackUrl, request)})}"
    return RedirectResponse(url=target, status_code=303)


@router.post("/callback/credentials", response_model=SignInOut)
def sign_in_with_credentials(
    payload: CredentialsIn,
    request: Request,
    response: Response,
    options: AuthOptions = Depends(get_auth_options),
):
    provider = options.provider("credentials")
    if provider is None:
        raise HTTPException(status_code=404, detail="Credentials provider is not configured")

    profile = provider.authorize({"email": payload.email.strip(), "password": payload.password})
    if not profile:
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_MESSAGE)

    claims = options.callbacks.jwt(initial_token_claims(profile), profile)
    if not claims.get("sub"):
        logger.error("Authorized profile has no id; refusing to issue a session")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_MESSAGE)

    token, expires = create_session_token(claims)
    set_session_cookie(response, token)

    session = build_session(claims, expires, options.callbacks)
    logger.info("Session issued for user_id=%s role=%s", claims.get("id"), claims.get("role"))
    return SignInOut(
        ok=True,
        url=safe_callback_url(payload.callback_url, request),
        user=_session_user_out(session.get("user")),
    )


@router.get("/session", response_model=SessionOut, response_model_exclude_none=True)
def get_session(request: Request, response: Response, options: AuthOptions = Depends(get_auth_options)):
    """
    Return the current session, or {} when there is none.

    A valid session is re-signed on every read so active users keep a rolling expiry.
    """
    raw = read_session_cookie(request)
    claims = read_session_claims(raw)
    if not claims:
        if raw:
            clear_session_cookie(response)
        return SessionOut()

    claims = options.callbacks.jwt(dict(claims))
    token, expires = create_session_token(claims)
    set_session_cookie(response, token)

    session = build_session(claims, expires, options.callbacks)
    return SessionOut(user=_session_user_out(session.get("user")), expires=session.get("expires"))


@router.post("/signout", response_model=MessageOut)
def sign_out(response: Response):
    clear_session_cookie(response)
    return {"message": "Signed out"}

# app/auth/session.py
"""
Session callbacks.

With a stateless JWT session the profile row is only available at sign-in, so
``jwt_callback`` copies ``id``/``role`` into the token once and
``session_callback`` projects them from the token onto every materialized
session.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

PROJECTED_CLAIMS = ("id", "role")


def jwt_callback(token: dict[str, Any], user: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Persist the profile's id and role into the token claims at sign-in."""
    if user is not None:
        for key in PROJECTED_CLAIMS:
            token[key] = user.get(key)
    return token


def session_callback(session: dict[str, Any], user: Mapping[str, Any]) -> dict[str, Any]:
    """Copy id and role onto ``session["user"]``. No-op when the session has no user."""
    session_user = session.get("user")
    if session_user is not None:
        session_user["id"] = user.get("id")
        session_user["role"] = user.get("role")
    return session


def initial_token_claims(profile: Mapping[str, Any], identity_email: str | None = None) -> dict[str, Any]:
    """Default claims for a freshly authorized user, before ``jwt_callback`` runs."""
    user_id = profile.get("id")
    return {
        "sub": str(user_id) if user_id is not None else None,
        "name": profile.get("name"),
        "email": profile.get("email") or identity_email,
        "picture": profile.get("image") or profile.get("avatar_url"),
    }


def build_session(claims: Mapping[str, Any], expires: datetime, callbacks=None) -> dict[str, Any]:
    """Materialize the client-facing session from verified token claims."""
    session: dict[str, Any] = {
        "user": {
            "name": claims.get("name"),
            "email": claims.get("email"),
            "image": claims.get("picture"),
        },
        "expires": expires.isoformat(),
    }
    project = callbacks.session if callbacks is not None else session_callback
    return project(session, claims)

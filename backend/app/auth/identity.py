# app/auth/identity.py
"""
Canonical authenticated identity model.

Built from verified session-token claims so downstream code can reason about
"who is this user and what role do they have?" without touching raw JWTs.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Identity:
    """
    Canonical representation of an authenticated (or unauthenticated) user.

    Attributes:
        user_id: Profile row id (same as the Supabase auth user id).
        role: Application role copied from the profile row at sign-in. Not validated.
        email: User's email address if available.
        name: Display name if the profile row has one.
        is_authenticated: True if the request carried a valid session token.
        raw_claims: Verified token claims for debugging/audit.
                    Should NOT be used for authorization decisions.
    """

    user_id: str | None = None
    role: str | None = None
    email: str | None = None
    name: str | None = None
    is_authenticated: bool = False
    raw_claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def unauthenticated(cls) -> Identity:
        """Create an identity representing an unauthenticated request."""
        return cls()

    @classmethod
    def from_session_claims(cls, claims: Mapping[str, Any]) -> Identity:
        user_id = claims.get("id") or claims.get("sub")
        email = claims.get("email")
        return cls(
            user_id=str(user_id) if user_id is not None else None,
            role=claims.get("role"),
            email=email.strip().lower() if isinstance(email, str) and email else None,
            name=claims.get("name"),
            is_authenticated=user_id is not None,
            raw_claims=dict(claims),
        )


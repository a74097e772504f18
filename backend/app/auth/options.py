# app/auth/options.py
"""
Declarative auth configuration.

Groups everything the auth routes need to know: which providers exist, the
callbacks that shape tokens and sessions, the session strategy, the sign-in
page and the signing secret.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from app.auth.credentials import authorize
from app.auth.session import jwt_callback, session_callback
from app.core.config import Settings, settings as default_settings

AuthorizeFn = Callable[[Mapping[str, Any] | None], dict[str, Any] | None]


@dataclass(frozen=True)
class CredentialField:
    label: str
    type: str


@dataclass(frozen=True)
class CredentialsProvider:
    authorize: AuthorizeFn
    id: str = "credentials"
    name: str = "Credentials"
    type: str = "credentials"
    credentials: dict[str, CredentialField] = field(
        default_factory=lambda: {
            "email": CredentialField(label="Email", type="email"),
            "password": CredentialField(label="Password", type="password"),
        }
    )

    def describe(self, base_path: str) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "signinUrl": f"{base_path}/signin/{self.id}",
            "callbackUrl": f"{base_path}/callback/{self.id}",
        }


@dataclass(frozen=True)
class AuthCallbacks:
    jwt: Callable[..., dict[str, Any]] = jwt_callback
    session: Callable[..., dict[str, Any]] = session_callback


@dataclass(frozen=True)
class AuthOptions:
    providers: tuple[CredentialsProvider, ...]
    secret: str
    callbacks: AuthCallbacks = field(default_factory=AuthCallbacks)
    session_strategy: Literal["jwt"] = "jwt"
    session_max_age: int = 30 * 24 * 3600
    sign_in_page: str = "/login"

    def provider(self, provider_id: str) -> CredentialsProvider | None:
        for p in self.providers:
            if p.id == provider_id:
                return p
        return None


def build_auth_options(cfg: Settings | None = None) -> AuthOptions:
    cfg = cfg or default_settings
    return AuthOptions(
        providers=(CredentialsProvider(authorize=authorize),),
        secret=cfg.AUTH_SECRET,
        callbacks=AuthCallbacks(jwt=jwt_callback, session=session_callback),
        session_strategy="jwt",
        session_max_age=int(cfg.SESSION_MAX_AGE_SECONDS),
        sign_in_page=cfg.SIGN_IN_PAGE,
    )


def get_auth_options() -> AuthOptions:
    """FastAPI dependency; tests override it to swap providers or callbacks."""
    return build_auth_options()

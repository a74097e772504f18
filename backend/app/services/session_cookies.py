from __future__ import annotations

from fastapi import Request, Response

from app.core.config import settings


# -----------------------------
# Cookie helpers
# -----------------------------
def cookie_name() -> str:
    name = str(getattr(settings, "SESSION_COOKIE_NAME", "session_token")).strip() or "session_token"
    # Browsers only accept __Secure- cookies over HTTPS.
    if cookie_secure() and not name.startswith("__Secure-"):
        return f"__Secure-{name}"
    return name


def cookie_path() -> str:
    return "/"


def cookie_secure() -> bool:
    # Prod => HTTPS => Secure cookies. Dev http://localhost => must be False.
    return settings.is_prod


def cookie_samesite() -> str:
    """
    "lax" for same-site dev
    "none" ONLY if you truly need cross-site cookies (requires HTTPS + Secure=True)
    """
    v = str(getattr(settings, "SESSION_COOKIE_SAMESITE", "lax")).lower().strip()
    if v not in {"lax", "strict", "none"}:
        return "lax"
    return v


def cookie_max_age_seconds() -> int:
    return int(getattr(settings, "SESSION_MAX_AGE_SECONDS", 30 * 24 * 3600))


def set_session_cookie(resp: Response, token: str) -> None:
    resp.set_cookie(
        key=cookie_name(),
        value=token,
        httponly=True,
        secure=cookie_secure(),
        samesite=cookie_samesite(),
        max_age=cookie_max_age_seconds(),
        path=cookie_path(),
        domain=settings.SESSION_COOKIE_DOMAIN,
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(
        key=cookie_name(),
        path=cookie_path(),
        domain=settings.SESSION_COOKIE_DOMAIN,
    )


def read_session_cookie(req: Request) -> str | None:
    val = req.cookies.get(cookie_name())
    if not val:
        return None
    val = val.strip()
    return val or None

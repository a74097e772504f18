# app/core/config.py
import os

from dotenv import load_dotenv


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


REQUIRED_AUTH_SETTINGS = ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "AUTH_SECRET")


class Settings:
    def __init__(self) -> None:
        # Only load .env for local/dev. In prod, env vars come from the platform.
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            load_dotenv()

        # ----------------------------
        # Supabase (identity service + profile store)
        # ----------------------------
        self.SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip().rstrip("/")
        self.SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip()
        self.PROFILE_TABLE = os.getenv("PROFILE_TABLE", "users").strip() or "users"

        # ----------------------------
        # Session / JWT
        # ----------------------------
        self.AUTH_SECRET = os.getenv("AUTH_SECRET", "")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", str(30 * 24 * 3600)))
        self.SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_token")
        self.SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "lax")
        self.SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN", "") or None

        # ----------------------------
        # Pages
        # ----------------------------
        self.SIGN_IN_PAGE = os.getenv("SIGN_IN_PAGE", "/login").strip() or "/login"

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            # In prod: ONLY allow what you explicitly configure
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # Logging
        # ----------------------------
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        if self.SUPABASE_URL and not self.SUPABASE_URL.startswith("https://"):
            raise RuntimeError("SUPABASE_URL should be https://... in prod")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    def missing_auth_settings(self) -> list[str]:
        return [name for name in REQUIRED_AUTH_SETTINGS if not str(getattr(self, name, "") or "").strip()]


settings = Settings()


def require_auth_config() -> None:
    """Refuse to start unless the Supabase URL, service-role key and session secret are all set."""
    missing = settings.missing_auth_settings()
    if missing:
        raise RuntimeError(f"Missing required auth env vars: {', '.join(missing)}")

import os

# Ensure required auth config exists before importing app.main (it calls require_auth_config() at import time).
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_service_role_key")
os.environ.setdefault("AUTH_SECRET", "test_auth_secret")

import importlib

import pytest
from fastapi.testclient import TestClient

from app.core import config as app_config
from app.services import supabase_client


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "ENV",
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
        "AUTH_SECRET",
        "SESSION_MAX_AGE_SECONDS",
        "SESSION_COOKIE_NAME",
        "SIGN_IN_PAGE",
        "PROFILE_TABLE",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)
        supabase_client.reset_clients()


class FakeSupabase:
    """
    In-memory stand-in for the Supabase wrapper functions used by the authenticator.

    accounts: email -> (password, auth user id)
    profiles: auth user id -> profile row
    """

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}
        self.profiles: dict[str, dict] = {}
        self.sign_in_calls: list[str] = []
        self.profile_calls: list[str] = []
        self.sign_in_error: supabase_client.SupabaseClientError | None = None
        self.profile_error: supabase_client.SupabaseClientError | None = None

    def add_user(self, email: str, password: str, user_id: str, role: str | None = "user", **profile) -> None:
        self.accounts[email] = (password, user_id)
        self.profiles[user_id] = {"id": user_id, "email": email, "role": role, **profile}

    def sign_in_with_password(self, email: str, password: str):
        self.sign_in_calls.append(email)
        if self.sign_in_error is not None:
            raise self.sign_in_error
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise supabase_client.SupabaseClientError(
                code="invalid_credentials", message="Invalid login credentials", status=400
            )
        return {"id": account[1], "email": email, "user_metadata": {}}

    def fetch_profile(self, user_id: str, table: str | None = None):
        self.profile_calls.append(user_id)
        if self.profile_error is not None:
            raise self.profile_error
        row = self.profiles.get(user_id)
        if row is None:
            raise supabase_client.SupabaseClientError(
                code=supabase_client.PROFILE_NOT_FOUND_CODE,
                message="JSON object requested, multiple (or no) rows returned",
            )
        return dict(row)

    @property
    def network_calls(self) -> int:
        return len(self.sign_in_calls) + len(self.profile_calls)


@pytest.fixture()
def fake_supabase(monkeypatch):
    fake = FakeSupabase()
    monkeypatch.setattr("app.auth.credentials.supabase_sign_in_with_password", fake.sign_in_with_password)
    monkeypatch.setattr("app.auth.credentials.supabase_fetch_profile", fake.fetch_profile)
    return fake


@pytest.fixture()
def app(fake_supabase):
    import app.main as main

    importlib.reload(main)
    fastapi_app = main.app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def signed_in_client(client, fake_supabase):
    fake_supabase.add_user("admin@example.com", "correct-horse", "u1", role="admin", name="Ada Admin")
    res = client.post(
        "/api/auth/callback/credentials",
        json={"email": "admin@example.com", "password": "correct-horse"},
    )
    assert res.status_code == 200
    return client

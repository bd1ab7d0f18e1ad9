import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from app import config
from app.api import app, on_startup
from app.config import OwnershipPolicy
from app.errors import InternalConfig, duplicate_fields


def test_require_auth_settings_without_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(InternalConfig) as exc:
        config.require_auth_settings()
    assert exc.value.message == "secret not configured"


def test_startup_refuses_to_serve_without_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(InternalConfig):
        on_startup()


def test_missing_secret_at_request_time(client, monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    resp = client.get("/users/curr", headers={"Authorization": "Bearer abc.def.ghi"})
    assert resp.status_code == 500
    assert resp.json() == {"status": "error", "message": "secret not configured"}


def test_expiry_falls_back_on_bad_value(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRES_IN", "soon")
    assert config.get_auth_settings().expires_in == config.DEFAULT_JWT_EXPIRES_IN
    monkeypatch.setenv("JWT_EXPIRES_IN", "60")
    assert config.get_auth_settings().expires_in == 60


def test_settings_file_is_read(tmp_path, monkeypatch):
    settings = tmp_path / "settings.toml"
    settings.write_text('[startups]\nownership_policy = "enforce"\nmax_upload_mb = 2\n')
    monkeypatch.setenv("STARTUP_SETTINGS_PATH", str(settings))
    monkeypatch.delenv("STARTUP_OWNERSHIP_POLICY", raising=False)
    monkeypatch.delenv("STARTUP_MAX_UPLOAD_MB", raising=False)
    assert config.get_ownership_policy() is OwnershipPolicy.enforce
    assert config.get_max_upload_bytes() == 2_000_000


def test_env_overrides_settings_file(tmp_path, monkeypatch):
    settings = tmp_path / "settings.toml"
    settings.write_text('[startups]\nownership_policy = "enforce"\n')
    monkeypatch.setenv("STARTUP_SETTINGS_PATH", str(settings))
    monkeypatch.setenv("STARTUP_OWNERSHIP_POLICY", "legacy")
    assert config.get_ownership_policy() is OwnershipPolicy.legacy


def test_ownership_policy_defaults_and_rejects_unknown(monkeypatch):
    monkeypatch.delenv("STARTUP_OWNERSHIP_POLICY", raising=False)
    assert config.get_ownership_policy() is OwnershipPolicy.legacy
    monkeypatch.setenv("STARTUP_OWNERSHIP_POLICY", "sometimes")
    with pytest.raises(InternalConfig):
        config.get_ownership_policy()


def test_default_upload_limit(monkeypatch):
    monkeypatch.delenv("STARTUP_MAX_UPLOAD_MB", raising=False)
    assert config.get_max_upload_bytes() == 10_000_000


def test_production_flag(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert config.is_production()
    monkeypatch.setenv("APP_ENV", "development")
    assert not config.is_production()


@pytest.mark.parametrize(
    "message,fields",
    [
        ("UNIQUE constraint failed: startup.name", ["name"]),
        ("UNIQUE constraint failed: user.username", ["username"]),
        ('duplicate key value violates unique constraint "ix_startup_name"\n'
         "DETAIL:  Key (name)=(Acme) already exists.", ["name"]),
        ("NOT NULL constraint failed: startup.tagline", []),
    ],
)
def test_duplicate_fields(message, fields):
    exc = IntegrityError("INSERT ...", {}, Exception(message))
    assert duplicate_fields(exc) == fields


def test_unexpected_errors_are_generic():
    @app.get("/_boom")
    def _boom():
        raise RuntimeError("internal detail")

    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/_boom")
    finally:
        app.router.routes = [r for r in app.router.routes if getattr(r, "path", None) != "/_boom"]
    assert resp.status_code == 500
    assert resp.json() == {"status": "error", "message": "Something went wrong"}

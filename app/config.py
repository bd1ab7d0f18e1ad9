"""Application configuration values and helpers.

Centralizes runtime configuration for:
  - Database URL (supports local file or server URL)
  - Token signing (secret, algorithm, lifetime)
  - Startup record policy (ownership checks, upload size cap)

Values can be provided via environment variables or a settings file at
``settings.toml`` in the repository root (or wherever
``STARTUP_SETTINGS_PATH`` points).

Environment variables (quick overrides):
  - DATABASE_URL: full SQLAlchemy URL; overrides settings.toml
  - JWT_SECRET: token signing secret (required)
  - JWT_EXPIRES_IN: token lifetime in seconds
  - JWT_ALGORITHM: token signing algorithm
  - APP_ENV: ``production`` marks session cookies as ``Secure``
  - STARTUP_OWNERSHIP_POLICY: ``legacy`` or ``enforce``
  - STARTUP_MAX_UPLOAD_MB: per-file upload cap (MB)
  - STARTUP_LOG_LEVEL: root log level
"""

from __future__ import annotations

import atexit
import os
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.engine import Engine, make_url
from sqlmodel import create_engine

from .errors import InternalConfig

BASE_DIR = Path(__file__).resolve().parent
REPO_ROOT = BASE_DIR.parent

DEFAULT_JWT_EXPIRES_IN = 3 * 24 * 60 * 60
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_MAX_UPLOAD_MB = 10
SESSION_COOKIE_NAME = "jwt"


class OwnershipPolicy(str, Enum):
    legacy = "legacy"
    enforce = "enforce"


def _determine_settings_path() -> Path:
    override = os.getenv("STARTUP_SETTINGS_PATH")
    if override:
        return Path(override).expanduser().resolve()
    return REPO_ROOT / "settings.toml"


def _read_settings_dict() -> Dict[str, Any]:
    path = _determine_settings_path()
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _from_settings(section: str, key: str) -> Optional[Any]:
    data = _read_settings_dict().get(section)
    if isinstance(data, Mapping):
        return data.get(key)
    return None


def _value_from_env_or_settings(env: str, section: str, key: str) -> Optional[str]:
    value = os.getenv(env)
    if value not in (None, ""):
        return value
    value = _from_settings(section, key)
    if value in (None, ""):
        return None
    return str(value)


def _coerce_positive_int(value: Any, default: int) -> int:
    try:
        if isinstance(value, (int, float)):
            candidate = int(value)
        else:
            candidate = int(float(str(value).strip()))
        if candidate > 0:
            return candidate
    except (TypeError, ValueError):
        pass
    return default


# ----------------------------- Database -----------------------------

def _ensure_sqlite_directory(url: str) -> str:
    try:
        url_obj = make_url(url)
    except Exception:
        return url
    if url_obj.get_backend_name() != "sqlite":
        return url
    database = url_obj.database or ""
    if not database or database == ":memory:" or database.startswith("file:"):
        return url
    db_path = Path(database)
    if not db_path.is_absolute():
        db_path = (REPO_ROOT / db_path).resolve()
        url_obj = url_obj.set(database=db_path.as_posix())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return url_obj.render_as_string(hide_password=False)


DEFAULT_URL = "sqlite:///startup_dev.db"


def load_database_url() -> str:
    """Return database URL from env or settings.toml."""
    url = _value_from_env_or_settings("DATABASE_URL", "database", "url")
    return _ensure_sqlite_directory(url or DEFAULT_URL)


def _make_engine(url: str) -> Engine:
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        # Request handlers run in FastAPI's thread pool.
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=False, connect_args=connect_args)


DATABASE_URL = load_database_url()
_ENGINE: Engine = _make_engine(DATABASE_URL)


def dispose_engine() -> None:
    """Dispose the global engine, releasing any pooled connections."""
    try:
        _ENGINE.dispose()
    except Exception:
        pass


atexit.register(dispose_engine)


def get_engine(url: Optional[str] = None) -> Engine:
    """Return engine, recreating if the URL changed."""
    global _ENGINE, DATABASE_URL
    new_url = _ensure_sqlite_directory(url) if url is not None else load_database_url()
    if new_url != DATABASE_URL:
        DATABASE_URL = new_url
        _ENGINE.dispose()
        _ENGINE = _make_engine(DATABASE_URL)
    return _ENGINE


# ------------------------------- Auth -------------------------------

@dataclass(frozen=True)
class AuthSettings:
    secret: Optional[str]
    algorithm: str = DEFAULT_JWT_ALGORITHM
    expires_in: int = DEFAULT_JWT_EXPIRES_IN


def get_auth_settings() -> AuthSettings:
    """Read token settings; the secret may be ``None``."""
    secret = _value_from_env_or_settings("JWT_SECRET", "auth", "jwt_secret")
    algorithm = (
        _value_from_env_or_settings("JWT_ALGORITHM", "auth", "jwt_algorithm")
        or DEFAULT_JWT_ALGORITHM
    )
    expires_in = _coerce_positive_int(
        _value_from_env_or_settings("JWT_EXPIRES_IN", "auth", "jwt_expires_in"),
        DEFAULT_JWT_EXPIRES_IN,
    )
    return AuthSettings(secret=secret, algorithm=algorithm, expires_in=expires_in)


def require_auth_settings() -> AuthSettings:
    """Return token settings or raise :class:`InternalConfig` without a secret."""
    settings = get_auth_settings()
    if not settings.secret:
        raise InternalConfig("secret not configured")
    return settings


def is_production() -> bool:
    env = _value_from_env_or_settings("APP_ENV", "app", "env") or "development"
    return env.strip().lower() in ("production", "prod")


def get_log_level() -> str:
    return (_value_from_env_or_settings("STARTUP_LOG_LEVEL", "app", "log_level") or "INFO").upper()


# ----------------------------- Startups -----------------------------

def get_ownership_policy() -> OwnershipPolicy:
    raw = _value_from_env_or_settings(
        "STARTUP_OWNERSHIP_POLICY", "startups", "ownership_policy"
    )
    if not raw:
        return OwnershipPolicy.legacy
    try:
        return OwnershipPolicy(raw.strip().lower())
    except ValueError as exc:
        raise InternalConfig(f"unknown ownership policy: {raw}") from exc


def get_max_upload_bytes() -> int:
    mb = _coerce_positive_int(
        _value_from_env_or_settings("STARTUP_MAX_UPLOAD_MB", "startups", "max_upload_mb"),
        DEFAULT_MAX_UPLOAD_MB,
    )
    return mb * 1_000_000

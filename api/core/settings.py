"""
Environment-driven settings.

Values are read lazily through small helpers so tests can override them with
`monkeypatch.setenv`. A `.env` file in the working directory is loaded once on
import.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SESSION_MAX_AGE_S = 600
DEFAULT_API_PORT = 3000
SESSION_COOKIE_NAME = "session"


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def session_secret() -> str:
    # Local default keeps development simple.
    # In production, set SESSION_SECRET in environment.
    return _env_str("SESSION_SECRET", "dev-change-this-secret")


def session_max_age_s() -> int:
    return _env_int("SESSION_MAX_AGE_S", DEFAULT_SESSION_MAX_AGE_S)


def session_https_only() -> bool:
    return _env_bool("SESSION_HTTPS_ONLY", False)


def msv_api_url() -> str:
    return _env_str("MSV_API")


def client_api_url() -> str:
    return _env_str("Client_API")


def attendance_api_url() -> str:
    return _env_str("Attendance_API")


def upstream_timeout_s() -> float | None:
    """
    None means the outbound fetch waits as long as the upstream takes.
    """
    return _env_float("UPSTREAM_TIMEOUT_S", None)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def api_host() -> str:
    return _env_str("API_HOST", "0.0.0.0")


def api_port() -> int:
    return _env_int("API_PORT", DEFAULT_API_PORT)

"""
Environment-driven settings.

Values are read on every call so tests (and process managers) can change
the environment without re-importing modules.
"""

from __future__ import annotations

import os

DEFAULT_PORT = 3000
DEFAULT_LOGO_SERVICE_URL = "https://logo.clearbit.com"


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def environment() -> str:
    return env_str("ENVIRONMENT", "development").lower()


def is_production() -> bool:
    return environment() == "production"


def host() -> str:
    return env_str("HOST", "0.0.0.0")


def port() -> int:
    return env_int("PORT", DEFAULT_PORT)


def webhook_url() -> str:
    # Empty means notifications are disabled.
    return os.environ.get("WEBHOOK_URL", "").strip()


def webhook_timeout_s() -> float:
    return env_float("WEBHOOK_TIMEOUT_S", 10.0)


def logo_service_url() -> str:
    return env_str("LOGO_SERVICE_URL", DEFAULT_LOGO_SERVICE_URL).rstrip("/")


def cors_origins() -> list[str]:
    raw = env_str("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()

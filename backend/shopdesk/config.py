# backend/shopdesk/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Shared staff login password (demo shop: one password, per-user usernames)
    SHOPDESK_LOGIN_PASSWORD = os.environ.get("SHOPDESK_LOGIN_PASSWORD", "123")

    # Start from the built-in mock catalogue, staff and suppliers
    SHOPDESK_SEED_MOCK_DATA = _env_flag("SHOPDESK_SEED_MOCK_DATA", True)

    # Document intelligence (VAT invoice parsing); unset key disables it
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_TIMEOUT_SECONDS = float(os.environ.get("GEMINI_TIMEOUT_SECONDS", "30"))

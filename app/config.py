"""Configuration classes for the Flask application."""

from __future__ import annotations

import os
import secrets


def _load_secret() -> str:
    """Return the Flask secret key for the current process."""

    secret = os.environ.get("PRICE_ESTIMATOR_SECRET")
    if secret:
        return secret
    # Generate an unpredictable per-process key for local development.
    return secrets.token_urlsafe(64)


class BaseConfig:
    SECRET_KEY = _load_secret()
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MiB
    JSON_SORT_KEYS = False
    LOG_LEVEL = os.environ.get("PRICE_ESTIMATOR_LOG_LEVEL", "INFO")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Strict"
    PLUGIN_DEFAULTS = {
        "price_estimator": {
            "upload": {"max_mb": 5, "max_files": 1},
            "max_rows": 100_000,
            "max_columns": 200,
            "max_sessions": 64,
            "training_delay_seconds": 0.5,
        }
    }
    RESPONSE_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
        "Referrer-Policy": "no-referrer",
    }


class TestingConfig(BaseConfig):
    TESTING = True
    PLUGIN_DEFAULTS = {
        "price_estimator": {
            **BaseConfig.PLUGIN_DEFAULTS["price_estimator"],
            "training_delay_seconds": 0.0,
        }
    }


__all__ = ["BaseConfig", "TestingConfig"]

from __future__ import annotations

from typing import Any

from app.core.config import settings

CORS_METHODS = ["GET", "POST", "OPTIONS"]


def cors_allowed_origins() -> list[str]:
    return list(settings.cors_allowed_origins)


def cors_allow_origin_regex() -> str | None:
    regex = (settings.cors_allow_origin_regex or "").strip()
    return regex or None


def cors_options() -> dict[str, Any]:
    origins = cors_allowed_origins()
    # Browsers reject credentialed responses for a wildcard origin.
    credentials = settings.cors_allow_credentials and "*" not in origins
    return {
        "allow_origins": origins,
        "allow_origin_regex": cors_allow_origin_regex(),
        "allow_credentials": credentials,
        "allow_methods": CORS_METHODS,
        "allow_headers": ["*"],
    }

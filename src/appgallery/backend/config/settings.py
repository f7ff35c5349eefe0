"""Resolve :class:`Settings` from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from werkzeug.security import generate_password_hash

from .schema import ConfigurationError, Settings

ENV_PREFIX = "APPGALLERY_"


def parse_allowed_origins(raw: str | None) -> tuple[str, ...]:
    """Convert a comma separated origin list into a normalised tuple."""

    if not raw:
        return ()

    return tuple(sorted({origin.strip() for origin in raw.split(",") if origin.strip()}))


def _default_storage_mode(env: Mapping[str, str]) -> str:
    if env.get(f"{ENV_PREFIX}ENV", "").lower() == "production" or env.get("VERCEL"):
        return "blob"
    return "local"


def _resolve_password_hash(env: Mapping[str, str]) -> str | None:
    password_hash = env.get(f"{ENV_PREFIX}ADMIN_PASSWORD_HASH", "").strip()
    if password_hash:
        return password_hash

    password = env.get(f"{ENV_PREFIX}ADMIN_PASSWORD")
    if password:
        return generate_password_hash(password)
    return None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build validated settings from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ

    raw: dict[str, Any] = {
        "secret_key": env.get(f"{ENV_PREFIX}SECRET_KEY") or None,
        "admin_password_hash": _resolve_password_hash(env),
        "allowed_origins": parse_allowed_origins(env.get(f"{ENV_PREFIX}ALLOWED_ORIGINS")),
        "storage_mode": (env.get(f"{ENV_PREFIX}STORAGE") or _default_storage_mode(env)).lower(),
    }

    optional = {
        "data_dir": f"{ENV_PREFIX}DATA_DIR",
        "blob_api_url": f"{ENV_PREFIX}BLOB_API_URL",
        "blob_timeout": f"{ENV_PREFIX}BLOB_TIMEOUT",
        "site_url": f"{ENV_PREFIX}SITE_URL",
    }
    for field, variable in optional.items():
        value = env.get(variable)
        if value:
            raw[field] = value

    try:
        return Settings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Settings validation failed: {error}") from error


__all__ = ["ENV_PREFIX", "load_settings", "parse_allowed_origins"]

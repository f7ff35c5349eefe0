"""Pydantic models describing runtime settings and declarative policies."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BLOB_API_URL = "https://blob.vercel-storage.com"
DEFAULT_SITE_URL = "https://gongmyung.com"


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Settings(ImmutableModel):
    """Process-wide settings resolved from the environment."""

    secret_key: str | None = None
    admin_password_hash: str | None = None
    allowed_origins: tuple[str, ...] = ()
    data_dir: Path = Path("data")
    storage_mode: Literal["local", "blob"] = "local"
    blob_api_url: str = DEFAULT_BLOB_API_URL
    blob_timeout: float = Field(default=30.0, gt=0)
    site_url: str = DEFAULT_SITE_URL

    @field_validator("blob_api_url", "site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ConfigurationError(f"Expected an absolute http(s) URL, got {value!r}")
        return stripped

    @property
    def uses_blob_storage(self) -> bool:
        return self.storage_mode == "blob"


class RemotePattern(ImmutableModel):
    """A single ``{protocol, hostname, port, pathname}`` image source rule."""

    protocol: Literal["http", "https"] = "https"
    hostname: str = Field(min_length=1)
    port: str = ""
    pathname: str = "/**"

    @field_validator("hostname")
    @classmethod
    def _normalise_hostname(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("pathname")
    @classmethod
    def _require_leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ConfigurationError("Remote image pathname patterns must start with '/'")
        return value


class ImagePolicy(ImmutableModel):
    """Allowlist of third-party hosts that may serve gallery images."""

    remote_patterns: tuple[RemotePattern, ...] = ()


__all__ = [
    "ConfigurationError",
    "DEFAULT_BLOB_API_URL",
    "DEFAULT_SITE_URL",
    "ImagePolicy",
    "ImmutableModel",
    "RemotePattern",
    "Settings",
]

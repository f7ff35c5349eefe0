"""Remote image allowlist loaded from ``data/remote_images.yaml``.

Hostname patterns treat ``*`` as exactly one DNS label and ``**`` as one or
more labels. Pathname patterns treat ``*`` as a single path segment and
``**`` as any remainder, including further slashes.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml
from pydantic import ValidationError

from .schema import ConfigurationError, ImagePolicy, RemotePattern

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
IMAGE_POLICY_FILE = CONFIG_DIRECTORY / "remote_images.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Image policy file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_image_policy() -> ImagePolicy:
    """Load and cache the remote image policy."""

    if not IMAGE_POLICY_FILE.exists():
        raise FileNotFoundError("Remote image policy not found")

    try:
        return ImagePolicy.model_validate(_load_yaml(IMAGE_POLICY_FILE))
    except ValidationError as error:
        raise ConfigurationError(f"Image policy validation failed: {error}") from error


@lru_cache(maxsize=64)
def _hostname_regex(pattern: str) -> re.Pattern[str]:
    labels: list[str] = []
    for label in pattern.split("."):
        if label == "**":
            labels.append(r"[^.]+(?:\.[^.]+)*")
        elif label == "*":
            labels.append(r"[^.]+")
        else:
            labels.append(re.escape(label).replace(r"\*", r"[^.]*"))
    return re.compile(r"^" + r"\.".join(labels) + r"$", re.IGNORECASE)


@lru_cache(maxsize=64)
def _pathname_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**", index):
            parts.append(r".*")
            index += 2
        elif pattern[index] == "*":
            parts.append(r"[^/]*")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return re.compile(r"^" + "".join(parts) + r"$")


def pattern_matches(pattern: RemotePattern, url: str) -> bool:
    """Return ``True`` when ``url`` satisfies every field of ``pattern``."""

    parts = urlsplit(url)
    if parts.scheme.lower() != pattern.protocol:
        return False

    hostname = parts.hostname or ""
    if not _hostname_regex(pattern.hostname).match(hostname):
        return False

    try:
        port = parts.port
    except ValueError:
        return False
    if (str(port) if port is not None else "") != pattern.port:
        return False

    return bool(_pathname_regex(pattern.pathname).match(parts.path or "/"))


def is_remote_image_allowed(url: str, policy: ImagePolicy | None = None) -> bool:
    """Decide whether an image URL may be rendered.

    Relative URLs point at our own static assets and are always allowed.
    """

    parts = urlsplit(url)
    if not parts.scheme and not parts.netloc:
        return bool(url)

    active = policy or load_image_policy()
    return any(pattern_matches(pattern, url) for pattern in active.remote_patterns)


__all__ = [
    "IMAGE_POLICY_FILE",
    "is_remote_image_allowed",
    "load_image_policy",
    "pattern_matches",
]

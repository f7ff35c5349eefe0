"""Request gatekeeper evaluated before route dispatch.

Public paths short-circuit every future access policy. Anything else is
forwarded through :func:`enforce_policy`, which currently never rejects.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from flask import Flask, g, request
from flask.typing import ResponseReturnValue

logger = logging.getLogger(__name__)

INTERNAL_PREFIX = "/_internal"

# Requests under these prefixes never reach the gatekeeper at all.
MATCHER_EXCLUDED_PREFIXES: tuple[str, ...] = (
    f"{INTERNAL_PREFIX}/static",
    f"{INTERNAL_PREFIX}/image",
)

PUBLIC_PREFIXES: tuple[str, ...] = (
    INTERNAL_PREFIX,
    "/static",
    "/images",
    "/api/public",
)

PUBLIC_PATHS = frozenset(
    {
        "/manifest.json",
        "/favicon.ico",
        "/robots.txt",
        "/sitemap.xml",
    }
)

ICON_PATTERN = re.compile(r"^/icon(-\d+x\d+)?\.png$")
APPLE_ICON_PATTERN = re.compile(r"^/apple-icon(-\d+x\d+)?\.png$")


class GatekeeperDecision(str, Enum):
    """How the gatekeeper treated a request path."""

    SKIPPED = "skipped"
    PUBLIC = "public"
    PASS_THROUGH = "pass_through"


def matches_gatekeeper(path: str) -> bool:
    """Return ``False`` for paths excluded from the gatekeeper by the matcher."""

    return not path.startswith(MATCHER_EXCLUDED_PREFIXES)


def is_public_path(path: str) -> bool:
    return (
        path.startswith(PUBLIC_PREFIXES)
        or path in PUBLIC_PATHS
        or ICON_PATTERN.match(path) is not None
        or APPLE_ICON_PATTERN.match(path) is not None
    )


def evaluate_request_path(path: str) -> GatekeeperDecision:
    if not matches_gatekeeper(path):
        return GatekeeperDecision.SKIPPED
    if is_public_path(path):
        return GatekeeperDecision.PUBLIC
    return GatekeeperDecision.PASS_THROUGH


def enforce_policy(path: str) -> ResponseReturnValue | None:
    """Access policy for non-public paths.

    No rule is defined yet, so every request is forwarded unchanged. Returning
    a response here would short-circuit the request.
    """

    return None


def register_gatekeeper(app: Flask) -> None:
    """Install the gatekeeper as the first ``before_request`` hook."""

    @app.before_request
    def _gatekeeper() -> ResponseReturnValue | None:
        path = request.path
        decision = evaluate_request_path(path)
        g.gatekeeper_decision = decision
        logger.debug("Gatekeeper %s: %s", decision.value, path)

        if decision is GatekeeperDecision.PASS_THROUGH:
            return enforce_policy(path)
        return None


__all__ = [
    "APPLE_ICON_PATTERN",
    "GatekeeperDecision",
    "ICON_PATTERN",
    "INTERNAL_PREFIX",
    "MATCHER_EXCLUDED_PREFIXES",
    "PUBLIC_PATHS",
    "PUBLIC_PREFIXES",
    "enforce_policy",
    "evaluate_request_path",
    "is_public_path",
    "matches_gatekeeper",
    "register_gatekeeper",
]

"""Unit coverage for the request gatekeeper rules."""

from __future__ import annotations

import pytest

from appgallery.backend.app.gatekeeper import (
    GatekeeperDecision,
    enforce_policy,
    evaluate_request_path,
    is_public_path,
    matches_gatekeeper,
)


@pytest.mark.parametrize(
    "path",
    [
        "/_internal/chunks/main.js",
        "/static/logo.svg",
        "/images/hero.png",
        "/api/public/x",
        "/manifest.json",
        "/favicon.ico",
        "/robots.txt",
        "/sitemap.xml",
        "/icon.png",
        "/icon-192x192.png",
        "/apple-icon.png",
        "/apple-icon-180x180.png",
    ],
)
def test_public_paths_are_allowed(path: str) -> None:
    assert is_public_path(path)
    assert evaluate_request_path(path) is GatekeeperDecision.PUBLIC


@pytest.mark.parametrize(
    "path",
    [
        "/",
        "/admin",
        "/api/data/apps",
        "/favicon.ico/extra",
        "/icon-192.png",
        "/icon-192x192.jpg",
        "/icons/icon.png",
        "/apple-icon-axb.png",
    ],
)
def test_other_paths_pass_through(path: str) -> None:
    assert not is_public_path(path)
    assert evaluate_request_path(path) is GatekeeperDecision.PASS_THROUGH


@pytest.mark.parametrize("path", ["/_internal/static/gallery.css", "/_internal/image/abc"])
def test_matcher_excludes_internal_assets(path: str) -> None:
    assert not matches_gatekeeper(path)
    assert evaluate_request_path(path) is GatekeeperDecision.SKIPPED


def test_enforcement_placeholder_never_rejects() -> None:
    assert enforce_policy("/admin") is None

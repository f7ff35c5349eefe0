"""Application-scoped services and per-request state accessors."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from flask import Flask, current_app, g

from appgallery.backend.app.http import problem_response
from appgallery.backend.app.services.catalog_service import CatalogRepository
from appgallery.backend.app.services.content_service import ContentService
from appgallery.backend.app.state import (
    AdminCredentials,
    AdminSessionRegistry,
    AdminSessionStore,
    LanguagePreferenceStore,
    SessionStateStorage,
)
from appgallery.backend.config.schema import Settings

EXTENSION_KEY = "appgallery"

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class GalleryServices:
    """Long-lived collaborators shared by every request."""

    settings: Settings
    credentials: AdminCredentials
    catalog: CatalogRepository
    content: ContentService
    admin_sessions: AdminSessionRegistry = field(default_factory=AdminSessionRegistry)


def init_services(app: Flask, services: GalleryServices) -> None:
    app.extensions[EXTENSION_KEY] = services


def get_services() -> GalleryServices:
    return cast(GalleryServices, current_app.extensions[EXTENSION_KEY])


def get_admin_store() -> AdminSessionStore:
    """Return the admin session store bound to the current client session."""

    if "admin_store" not in g:
        services = get_services()
        g.admin_store = AdminSessionStore(
            SessionStateStorage(), services.credentials, services.admin_sessions
        )
    return cast(AdminSessionStore, g.admin_store)


def get_language_store() -> LanguagePreferenceStore:
    if "language_store" not in g:
        g.language_store = LanguagePreferenceStore(SessionStateStorage())
    return cast(LanguagePreferenceStore, g.language_store)


def admin_required(view: F) -> F:
    """Reject the request with HTTP 403 unless the admin session is authenticated."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not get_admin_store().is_authenticated:
            return problem_response(
                "forbidden", status=403, message="Admin authentication required"
            ).to_response()
        return view(*args, **kwargs)

    return cast(F, wrapper)


__all__ = [
    "EXTENSION_KEY",
    "GalleryServices",
    "admin_required",
    "get_admin_store",
    "get_language_store",
    "get_services",
    "init_services",
]

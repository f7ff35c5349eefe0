"""Server-rendered gallery pages and the not-found fallback."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Blueprint, render_template
from werkzeug.exceptions import NotFound

from appgallery.backend.app.extensions import (
    get_admin_store,
    get_language_store,
    get_services,
)
from appgallery.backend.app.localization import get_translator
from appgallery.backend.config.image_policy import is_remote_image_allowed

blueprint = Blueprint("pages", __name__)

NOT_FOUND_ROBOTS = "noindex, follow"


def _display_image(url: Any) -> str | None:
    if isinstance(url, str) and url and is_remote_image_allowed(url):
        return url
    return None


def _app_card(item: Any) -> dict[str, Any] | None:
    if not isinstance(item, Mapping):
        return None
    return {
        "id": item.get("id"),
        "name": item.get("name") or "",
        "developer": item.get("developer") or "",
        "description": item.get("description") or "",
        "icon_url": _display_image(item.get("iconUrl")),
    }


@blueprint.get("/")
def index():
    """Render the public gallery listing in the client's language."""

    language = get_language_store()
    translator = get_translator(language.language)
    catalog = get_services().catalog

    apps = [card for card in map(_app_card, catalog.load("apps")) if card is not None]
    contents = [
        item
        for item in catalog.load("contents")
        if isinstance(item, Mapping) and item.get("isPublished", True)
    ]

    return render_template(
        "index.html",
        t=translator,
        locale=translator.locale,
        language_label=language.toggle_label(),
        is_admin=get_admin_store().is_authenticated,
        apps=apps,
        contents=contents,
    )


def render_not_found(error: NotFound):
    """Fixed 404 page, excluded from search indexes but with links followed."""

    translator = get_translator(get_language_store().language)
    body = render_template(
        "not_found.html",
        t=translator,
        locale=translator.locale,
        robots=NOT_FOUND_ROBOTS,
    )
    return body, 404, {"X-Robots-Tag": NOT_FOUND_ROBOTS}

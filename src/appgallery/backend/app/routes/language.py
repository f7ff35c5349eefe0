"""Read, set and cycle the client's language preference."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, redirect, request, url_for
from werkzeug.exceptions import BadRequest

from appgallery.backend.app.extensions import get_language_store
from appgallery.backend.app.localization import language_codes, language_name
from appgallery.backend.app.state import LanguagePreferenceStore

blueprint = Blueprint("language", __name__, url_prefix="/api/language")


def _serialise(store: LanguagePreferenceStore) -> dict[str, Any]:
    return {
        "language": store.language,
        "name": store.toggle_label(),
        "languages": [{"code": code, "name": language_name(code)} for code in language_codes()],
    }


@blueprint.get("")
def get_language():
    return jsonify(_serialise(get_language_store())), 200


@blueprint.put("")
def set_language():
    """Select a language explicitly; unsupported codes yield ``validation_error``."""

    payload = request.get_json(silent=True) or {}
    code = payload.get("language") if isinstance(payload, dict) else None
    if not isinstance(code, str):
        raise BadRequest("Request body must include a 'language' string")

    store = get_language_store()
    store.set_language(code)
    return jsonify(_serialise(store)), 200


@blueprint.post("/toggle")
def toggle_language():
    """Advance to the next language in registry order."""

    store = get_language_store()
    store.toggle()
    if request.mimetype == "application/x-www-form-urlencoded":
        return redirect(request.referrer or url_for("pages.index"))
    return jsonify(_serialise(store)), 200

"""Serve translation catalogues, defaulting to the client's chosen language."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from appgallery.backend.app.extensions import get_language_store
from appgallery.backend.app.http import problem_response
from appgallery.backend.app.localization import (
    is_supported_language,
    language_codes,
    load_translations,
)

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/")
def get_default_translations():
    """Catalogue for ``?locale=``, else for the stored language preference."""

    locale_hint = request.args.get("locale") or get_language_store().language
    return jsonify(load_translations(locale_hint)), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Catalogue for an explicit slug; region suffixes (``ja-JP``) are ignored."""

    code = locale.strip().lower().replace("_", "-").split("-")[0]
    if not is_supported_language(code):
        return problem_response(
            "unknown_locale",
            status=404,
            message=f"No catalogue for locale '{locale}'",
            available_locales=list(language_codes()),
        ).to_response()
    return jsonify(load_translations(code)), 200

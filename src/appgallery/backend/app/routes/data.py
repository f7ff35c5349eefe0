"""Catalog collection endpoints (apps, contents, featured and event ids)."""

from __future__ import annotations

import logging

from flask import Blueprint, request

from appgallery.backend.app.extensions import admin_required, get_services
from appgallery.backend.app.http import problem_response, uncached_json

blueprint = Blueprint("data", __name__, url_prefix="/api/data")

logger = logging.getLogger(__name__)

_KIND = "<any(apps, contents, featured, events):kind>"


@blueprint.get(f"/{_KIND}")
def get_collection(kind: str):
    return uncached_json(get_services().catalog.load(kind))


@blueprint.post(f"/{_KIND}")
@admin_required
def replace_collection(kind: str):
    """Replace a collection; non-array bodies are stored as an empty list."""

    body = request.get_json(silent=True)
    items = body if isinstance(body, list) else []

    try:
        result = get_services().catalog.save(kind, items)
    except (OSError, ValueError) as error:
        logger.error("Saving %s failed: %s", kind, error)
        return problem_response(
            "storage_error", status=500, message=f"Failed to save {kind}"
        ).to_response()

    return uncached_json(result.as_dict())

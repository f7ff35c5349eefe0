"""Per-item content endpoints (app stories and news)."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint, request

from appgallery.backend.app.extensions import admin_required, get_services
from appgallery.backend.app.http import problem_response, uncached_json
from appgallery.backend.app.services.catalog_service import SaveResult

blueprint = Blueprint("content", __name__, url_prefix="/api/content")

logger = logging.getLogger(__name__)


def _not_found(content_id: Any):
    return problem_response(
        "not_found", status=404, message=f"No content with id {content_id}"
    ).to_response()


def _storage_error(error: OSError):
    logger.error("Saving contents failed: %s", error)
    return problem_response(
        "storage_error", status=500, message="Failed to save contents"
    ).to_response()


def _with_storage(record: dict[str, Any], result: SaveResult) -> dict[str, Any]:
    payload = {**record, "storage": result.storage}
    if result.warning:
        payload["warning"] = result.warning
    return payload


@blueprint.get("")
def list_contents():
    """``?type=`` narrows by content type, ``?published=true`` hides drafts."""

    contents = get_services().content.list_contents(
        content_type=request.args.get("type") or None,
        published_only=request.args.get("published") == "true",
    )
    return uncached_json(contents)


@blueprint.post("")
@admin_required
def create_content():
    try:
        record, result = get_services().content.create(request.get_json(silent=True))
    except OSError as error:
        return _storage_error(error)
    return uncached_json(_with_storage(record, result), HTTPStatus.CREATED)


@blueprint.put("")
@admin_required
def update_content():
    body = request.get_json(silent=True)
    try:
        record, result = get_services().content.update(body)
    except KeyError as error:
        return _not_found(error.args[0])
    except OSError as error:
        return _storage_error(error)
    return uncached_json(_with_storage(record, result))


@blueprint.delete("")
@admin_required
def delete_content():
    content_id = request.args.get("id")
    if not content_id:
        return problem_response(
            "bad_request", status=400, message="Query parameter 'id' is required"
        ).to_response()

    try:
        result = get_services().content.delete(content_id)
    except KeyError:
        return _not_found(content_id)
    except OSError as error:
        return _storage_error(error)
    return uncached_json({"success": True, "deletedId": content_id, "storage": result.storage})

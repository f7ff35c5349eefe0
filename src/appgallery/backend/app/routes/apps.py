"""Admin operations on individual apps: featured/event membership and deletion."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from flask import Blueprint, request

from appgallery.backend.app.extensions import admin_required, get_services
from appgallery.backend.app.http import problem_response, uncached_json
from appgallery.backend.app.models import (
    FeaturedPatchRequest,
    FeaturedSetsRequest,
    FeaturedToggleRequest,
    parse_request,
)
from appgallery.backend.app.services.catalog_service import SaveResult

blueprint = Blueprint("apps", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)


def _storage_error(action: str, error: OSError):
    logger.error("%s failed: %s", action, error)
    return problem_response(
        "storage_error", status=500, message=f"{action} failed"
    ).to_response()


def _sets_payload(
    sets: Mapping[str, list[str]], results: Sequence[SaveResult]
) -> dict[str, Any]:
    storage = results[0].storage
    if any(result.storage == "memory" for result in results):
        storage = "memory"
    payload: dict[str, Any] = {"success": True, "storage": storage, **sets}
    warnings = [result.warning for result in results if result.warning]
    if warnings:
        payload["warning"] = warnings[0]
    return payload


def _toggle(kind: str, app_id: str, present: bool):
    catalog = get_services().catalog
    try:
        result = catalog.toggle_id(kind, app_id, present=present)
    except OSError as error:
        return _storage_error(f"Updating {kind}", error)

    sets = catalog.featured_sets()
    sets[kind] = list(result.data)
    return uncached_json(_sets_payload(sets, [result]))


@blueprint.get("/apps/featured")
def get_featured_sets():
    return uncached_json(get_services().catalog.featured_sets())


@blueprint.post("/apps/featured")
@admin_required
def replace_featured_sets():
    """Overwrite both id lists with ``{"featured": [...], "events": [...]}``."""

    body = parse_request(FeaturedSetsRequest, request.get_json(silent=True))
    catalog = get_services().catalog
    try:
        results = [
            catalog.replace_ids("featured", body.featured),
            catalog.replace_ids("events", body.events),
        ]
    except OSError as error:
        return _storage_error("Saving featured sets", error)

    sets = {"featured": list(results[0].data), "events": list(results[1].data)}
    return uncached_json(_sets_payload(sets, results))


@blueprint.put("/apps/featured")
@admin_required
def toggle_featured():
    """``{"appId", "type", "action"}``; ``action`` defaults to ``add``."""

    body = parse_request(FeaturedToggleRequest, request.get_json(silent=True))
    return _toggle(body.type, body.app_id, body.action == "add")


@blueprint.patch("/apps/featured")
@admin_required
def patch_featured():
    """``{"list", "op", "id"}`` form of the same toggle."""

    body = parse_request(FeaturedPatchRequest, request.get_json(silent=True))
    return _toggle(body.collection, body.id, body.op == "add")


@blueprint.delete("/delete-app")
@admin_required
def delete_app():
    """Remove an app record by ``{"id": ...}``; uploaded files are left alone."""

    body = request.get_json(silent=True)
    app_id = body.get("id") if isinstance(body, Mapping) else None
    if isinstance(app_id, int) and not isinstance(app_id, bool):
        app_id = str(app_id)
    if not isinstance(app_id, str) or not app_id:
        return problem_response(
            "bad_request", status=400, message="App ID is required"
        ).to_response()

    try:
        result = get_services().catalog.delete_app(app_id)
    except KeyError:
        return problem_response(
            "not_found", status=404, message=f"No app with id {app_id}"
        ).to_response()
    except OSError as error:
        return _storage_error(f"Deleting app {app_id}", error)

    payload: dict[str, Any] = {
        "success": True,
        "deletedAppId": app_id,
        "storage": result.storage,
    }
    if result.warning:
        payload["warning"] = result.warning
    return uncached_json(payload)

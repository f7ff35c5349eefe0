"""Admin session endpoints backed by server-side credential checks."""

from __future__ import annotations

from flask import Blueprint, request
from werkzeug.exceptions import BadRequest

from appgallery.backend.app.extensions import get_admin_store
from appgallery.backend.app.http import uncached_json

blueprint = Blueprint("admin", __name__, url_prefix="/api/admin")


@blueprint.get("/session")
def get_session():
    return uncached_json(get_admin_store().snapshot())


@blueprint.post("/login")
def login():
    """Attempt a login; an incorrect password is reported, not raised."""

    payload = request.get_json(silent=True) or {}
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str):
        raise BadRequest("Request body must include a 'password' string")

    store = get_admin_store()
    authenticated = store.login(password)
    return uncached_json({"authenticated": authenticated, **store.snapshot()})


@blueprint.post("/logout")
def logout():
    store = get_admin_store()
    store.logout()
    return uncached_json(store.snapshot())

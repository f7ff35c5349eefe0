"""Application factory for the app gallery backend."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from appgallery.backend.config.schema import Settings
from appgallery.backend.config.settings import load_settings
from appgallery.backend.storage.blob_store import BlobStore, BlobStoreError, HttpBlobStore
from appgallery.backend.version import get_project_version

from .extensions import GalleryServices, init_services
from .gatekeeper import INTERNAL_PREFIX, register_gatekeeper
from .http import problem_response
from .routes import register_routes
from .routes.pages import render_not_found
from .services.catalog_service import CatalogRepository
from .services.content_service import ContentService
from .state import AdminCredentials

logger = logging.getLogger(__name__)

# Persisted client state (language, admin flag) only ends on explicit change.
SESSION_LIFETIME = timedelta(days=3650)


def _build_blob_store(settings: Settings) -> BlobStore | None:
    if not settings.uses_blob_storage:
        return None
    try:
        return HttpBlobStore.from_environment(
            base_url=settings.blob_api_url, timeout=settings.blob_timeout
        )
    except BlobStoreError as error:
        warn(f"{error}; falling back to local catalog files.", stacklevel=2)
        return None


def create_app(
    settings: Settings | None = None,
    *,
    blob_store: BlobStore | None = None,
) -> Flask:
    """Create and configure the Flask application instance.

    ``blob_store`` overrides the client built from ``settings`` when given.
    """

    settings = settings or load_settings()
    app = Flask(__name__, static_url_path=f"{INTERNAL_PREFIX}/static")

    if settings.secret_key:
        app.secret_key = settings.secret_key
    else:
        warn(
            "APPGALLERY_SECRET_KEY is not set; sessions will not survive a restart.",
            stacklevel=2,
        )
        app.secret_key = secrets.token_hex(32)

    app.config["PERMANENT_SESSION_LIFETIME"] = SESSION_LIFETIME

    if not settings.admin_password_hash:
        warn("No admin password configured; admin login is disabled.", stacklevel=2)

    if not settings.allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=2,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.allowed_origins)}},
        supports_credentials=False,
        methods=["DELETE", "GET", "OPTIONS", "PATCH", "POST", "PUT"],
        allow_headers=["Content-Type"],
    )

    store = blob_store if blob_store is not None else _build_blob_store(settings)
    catalog = CatalogRepository(settings.data_dir, blob_store=store)
    logger.info(
        "Catalog storage: %s (data dir %s)",
        "blob" if catalog.uses_blob_storage else "local",
        settings.data_dir,
    )

    init_services(
        app,
        GalleryServices(
            settings=settings,
            credentials=AdminCredentials(settings.admin_password_hash),
            catalog=catalog,
            content=ContentService(catalog),
        ),
    )

    register_gatekeeper(app)
    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        return jsonify(
            {
                "status": "ok",
                "version": get_project_version(),
                "storage": "blob" if catalog.uses_blob_storage else "local",
            }
        )

    app.register_error_handler(404, render_not_found)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    return app

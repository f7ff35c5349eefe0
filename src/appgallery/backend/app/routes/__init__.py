"""Blueprint registrations for application routes."""

from flask import Flask

from .admin import blueprint as admin_blueprint
from .apps import blueprint as apps_blueprint
from .content import blueprint as content_blueprint
from .data import blueprint as data_blueprint
from .language import blueprint as language_blueprint
from .localization import blueprint as translations_blueprint
from .pages import blueprint as pages_blueprint
from .public import blueprint as public_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(admin_blueprint)
    app.register_blueprint(apps_blueprint)
    app.register_blueprint(content_blueprint)
    app.register_blueprint(data_blueprint)
    app.register_blueprint(language_blueprint)
    app.register_blueprint(translations_blueprint)
    app.register_blueprint(pages_blueprint)
    app.register_blueprint(public_blueprint)

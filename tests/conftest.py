"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402
from werkzeug.security import generate_password_hash  # noqa: E402

from appgallery.backend.app import create_app  # noqa: E402
from appgallery.backend.config.schema import Settings  # noqa: E402

ADMIN_PASSWORD = "gallery-admin-pass"
ALLOWED_ORIGIN = "https://allowed.test"


@pytest.fixture()
def admin_password() -> str:
    return ADMIN_PASSWORD


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture()
def settings(data_dir: Path) -> Settings:
    """Settings with a known admin password and an isolated data directory."""

    return Settings(
        secret_key="test-secret-key",
        admin_password_hash=generate_password_hash(
            ADMIN_PASSWORD, method="pbkdf2:sha256:1000"
        ),
        allowed_origins=(ALLOWED_ORIGIN,),
        data_dir=data_dir,
        site_url="https://gallery.test",
    )


@pytest.fixture()
def app(settings: Settings) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(settings)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def admin_client(client: FlaskClient) -> FlaskClient:
    """Test client whose session already holds an authenticated admin flag."""

    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.get_json()["authenticated"] is True
    return client

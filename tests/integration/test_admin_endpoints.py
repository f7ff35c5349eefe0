"""Integration tests for the admin session endpoints."""

from datetime import datetime, timedelta, timezone
from http import HTTPStatus

from flask.testing import FlaskClient

from appgallery.backend.app import create_app
from appgallery.backend.config.schema import Settings

SESSION_COOKIE = "session"


def test_session_starts_unauthenticated(client: FlaskClient) -> None:
    response = client.get("/api/admin/session")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"isAuthenticated": False}


def test_wrong_password_is_not_an_error(client: FlaskClient) -> None:
    response = client.post("/api/admin/login", json={"password": "wrong"})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"authenticated": False, "isAuthenticated": False}
    assert client.get("/api/admin/session").get_json() == {"isAuthenticated": False}


def test_login_persists_in_session(client: FlaskClient, admin_password: str) -> None:
    response = client.post("/api/admin/login", json={"password": admin_password})

    assert response.get_json()["authenticated"] is True
    assert client.get("/api/admin/session").get_json() == {"isAuthenticated": True}


def test_logout_is_idempotent(admin_client: FlaskClient) -> None:
    first = admin_client.post("/api/admin/logout")
    second = admin_client.post("/api/admin/logout")

    assert first.get_json() == second.get_json() == {"isAuthenticated": False}
    assert admin_client.get("/api/admin/session").get_json() == {"isAuthenticated": False}


def test_login_requires_password_field(client: FlaskClient) -> None:
    response = client.post("/api/admin/login", json={"pass": "x"})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "bad_request"


def test_cookie_from_before_logout_loses_admin_rights(admin_client: FlaskClient) -> None:
    stale = admin_client.get_cookie(SESSION_COOKIE)
    assert stale is not None

    admin_client.post("/api/admin/logout")
    assert admin_client.post("/api/data/apps", json=[]).status_code == HTTPStatus.FORBIDDEN

    admin_client.set_cookie(SESSION_COOKIE, stale.value)
    response = admin_client.post("/api/data/apps", json=[{"id": "1"}])

    assert response.status_code == HTTPStatus.FORBIDDEN
    assert admin_client.get("/api/admin/session").get_json() == {"isAuthenticated": False}


def test_cookie_from_other_app_instance_is_not_trusted(
    admin_client: FlaskClient, settings: Settings
) -> None:
    cookie = admin_client.get_cookie(SESSION_COOKIE)
    assert cookie is not None
    other = create_app(settings).test_client()
    other.set_cookie(SESSION_COOKIE, cookie.value)

    assert other.get("/api/admin/session").get_json() == {"isAuthenticated": False}


def test_admin_cookie_does_not_lapse_after_a_month(admin_client: FlaskClient) -> None:
    cookie = admin_client.get_cookie(SESSION_COOKIE)

    assert cookie is not None
    assert cookie.expires is not None
    assert cookie.expires > datetime.now(timezone.utc) + timedelta(days=5 * 365)

"""Integration tests covering CORS behaviour for API endpoints."""

from flask.testing import FlaskClient

ALLOWED_ORIGIN = "https://allowed.test"
DISALLOWED_ORIGIN = "https://blocked.test"


def test_api_endpoint_includes_cors_headers(client: FlaskClient) -> None:
    response = client.get("/api/data/apps", headers={"Origin": ALLOWED_ORIGIN})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN


def test_preflight_request_returns_success(client: FlaskClient) -> None:
    response = client.options(
        "/api/language",
        headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "PUT"},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN
    assert "PUT" in response.headers.get("Access-Control-Allow-Methods", "")


def test_disallowed_origin_does_not_receive_cors_headers(client: FlaskClient) -> None:
    response = client.get("/api/data/apps", headers={"Origin": DISALLOWED_ORIGIN})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_preflight_allows_management_methods(client: FlaskClient) -> None:
    response = client.options(
        "/api/content",
        headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "DELETE"},
    )

    allowed = response.headers.get("Access-Control-Allow-Methods", "")
    assert "DELETE" in allowed
    assert "PATCH" in allowed

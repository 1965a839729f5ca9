"""Tests for the health check endpoint and application factory."""

import uuid

from fastapi.testclient import TestClient

from juno.config.settings import JunoSettings
from juno.main import create_app


def test_health_returns_success_envelope(client):
    resp = client.get("/api/v1/health/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["message"] == "Success"
    assert body["data"] == {"message": "Server is running."}
    assert "metadata" not in body
    assert body["timestamp"].endswith("Z")


def test_health_carries_request_id(client):
    resp = client.get("/api/v1/health/")
    rid = resp.headers["X-Request-ID"]
    assert str(uuid.UUID(rid, version=4)) == rid


def test_api_prefix_is_configurable():
    app = create_app(JunoSettings(api_prefix="/v2"))
    client = TestClient(app, raise_server_exceptions=False)
    assert client.get("/v2/health/").status_code == 200
    assert client.get("/api/v1/health/").status_code == 404


def test_settings_stored_on_app(app, settings):
    assert app.state.settings is settings

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

import neuratalk.main as main_module
from neuratalk.config import Settings
from neuratalk.main import app

SETTINGS = Settings(gemini_api_key="test-key", gemini_model="gemini-test", api_base_url="http://api.test")


def _mock_upstream(status_code=200, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = body
    return resp


@pytest.fixture
def client():
    """TestClient with injected settings, lifespan triggered."""
    with patch.object(main_module, "get_settings", return_value=SETTINGS):
        with TestClient(app) as client:
            yield client


def test_health_returns_running(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "NeuraTalk API running"}


def test_lifespan_builds_relay_with_settings(client):
    assert main_module.relay.settings is SETTINGS


def test_chat_endpoint_returns_reply(client):
    upstream = _mock_upstream(200, {"candidates": [{"content": {"parts": [{"text": "Hello there"}]}}]})
    with patch("neuratalk.relay.requests.post", return_value=upstream):
        response = client.post("/api/chat", json={"message": "hello"})
    assert response.status_code == 200
    assert response.json() == {"reply": "Hello there"}


def test_chat_endpoint_rejects_missing_message(client):
    with patch("neuratalk.relay.requests.post") as mock_post:
        response = client.post("/api/chat", json={})
    mock_post.assert_not_called()
    assert response.status_code == 400
    assert "error" in response.json()


def test_chat_endpoint_rejects_invalid_json(client):
    response = client.post(
        "/api/chat", content="not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must include a text message"}


def test_chat_endpoint_passes_upstream_error(client):
    upstream = _mock_upstream(429, {"error": {"message": "quota exceeded"}})
    with patch("neuratalk.relay.requests.post", return_value=upstream):
        response = client.post("/api/chat", json={"message": "hello"})
    assert response.status_code == 429
    assert response.json() == {"error": "quota exceeded"}


def test_chat_endpoint_without_api_key_is_server_error():
    with patch.object(main_module, "get_settings", return_value=Settings(gemini_api_key="")):
        with TestClient(app) as client:
            response = client.post("/api/chat", json={"message": "hello"})
    assert response.status_code == 500
    assert response.json() == {"error": "Gemini API key is not configured on the server"}


def test_unknown_route_returns_error_envelope(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_unhandled_exception_returns_error_envelope():
    with patch.object(main_module, "get_settings", return_value=SETTINGS):
        with TestClient(app, raise_server_exceptions=False) as client:
            with patch.object(main_module.relay, "handle", side_effect=RuntimeError("kaboom")):
                response = client.post("/api/chat", json={"message": "hello"})
    assert response.status_code == 500
    assert response.json() == {"error": "kaboom"}


def test_config_js_content_type(client):
    response = client.get("/config.js")
    assert response.status_code == 200
    assert "javascript" in response.headers["content-type"]


def test_config_js_exposes_api_base_url(client):
    response = client.get("/config.js")
    prefix = "window.NEURATALK_CONFIG = "
    assert response.text.startswith(prefix)
    config = json.loads(response.text[len(prefix):-1])
    assert config == {"apiBaseUrl": "http://api.test"}


def test_lifespan_configures_logging_from_settings():
    settings = Settings(gemini_api_key="k", log_level="DEBUG")
    with patch.object(main_module, "get_settings", return_value=settings), \
         patch.object(main_module, "configure_logging") as mock_configure:
        with TestClient(app):
            pass
    mock_configure.assert_called_once_with("DEBUG")

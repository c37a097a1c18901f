"""
Integration tests for the HTTP API.
Each test gets a fresh app over its own data directory; the LLM provider is
swapped for a scripted one after startup.
"""

import io
import json
import zipfile
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient

from accio.config import Settings
from accio.core.generation_client import GenerationClient
from accio.main import create_app


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        return Settings(
            local_storage_path=str(tmp_path / "data"),
            llm_api_key=None,
            openrouter_api_key=None,
            log_file_enabled=False,
            log_console_enabled=False,
            **overrides,
        )
    return _make


@pytest.fixture
def app(make_config):
    return create_app(make_config(log_api_requests=True))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def use_provider(app):
    """Install a provider on the running app's orchestrator."""
    def _use(provider):
        app.state.llm_provider = provider
        app.state.orchestrator.client = GenerationClient(provider)
        return provider
    return _use


@pytest.fixture
def auth_headers(client):
    response = client.post("/auth/register", json={
        "email": f"{uuid4().hex[:8]}@example.com",
        "password": "secret123",
        "name": "Tester",
    })
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _new_session(client, headers, name="My Component"):
    response = client.post("/sessions", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()["session"]


class TestAuth:
    """Register, login and token checks."""

    def test_register_login_me(self, client):
        email = "ada@example.com"
        register = client.post("/auth/register", json={"email": email, "password": "secret123"})
        assert register.status_code == 201
        assert "hashed_password" not in register.json()["user"]

        login = client.post("/auth/login", json={"email": email, "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["user"]["email"] == email

    def test_duplicate_email(self, client):
        body = {"email": "dup@example.com", "password": "secret123"}
        assert client.post("/auth/register", json=body).status_code == 201
        assert client.post("/auth/register", json=body).status_code == 400

    def test_wrong_password(self, client):
        client.post("/auth/register", json={"email": "bob@example.com", "password": "secret123"})
        response = client.post("/auth/login", json={"email": "bob@example.com", "password": "nope123"})
        assert response.status_code == 401

    def test_bad_token(self, client):
        response = client.get("/sessions", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_missing_token(self, client):
        assert client.get("/sessions").status_code in (401, 403)


class TestSessions:
    """Session CRUD endpoints."""

    def test_create_and_get(self, client, auth_headers):
        created = _new_session(client, auth_headers, "  Fancy Card  ")
        assert created["name"] == "Fancy Card"
        assert created["messages"] == []
        assert created["generated_code"] is None
        assert created["message_count"] == 0

        fetched = client.get(f"/sessions/{created['id']}", headers=auth_headers)
        assert fetched.status_code == 200
        assert fetched.json()["session"]["id"] == created["id"]

    def test_name_validation(self, client, auth_headers):
        assert client.post("/sessions", json={"name": "   "}, headers=auth_headers).status_code == 422
        assert client.post("/sessions", json={"name": "x" * 101}, headers=auth_headers).status_code == 422

    def test_list_rename_delete(self, client, auth_headers):
        first = _new_session(client, auth_headers, "First")
        second = _new_session(client, auth_headers, "Second")

        renamed = client.put(f"/sessions/{first['id']}", json={"name": "Renamed"}, headers=auth_headers)
        assert renamed.json()["session"]["name"] == "Renamed"

        listed = client.get("/sessions", headers=auth_headers).json()["sessions"]
        assert [s["name"] for s in listed] == ["Renamed", "Second"]

        assert client.delete(f"/sessions/{second['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/sessions/{second['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/sessions/{second['id']}", headers=auth_headers).status_code == 404
        listed = client.get("/sessions", headers=auth_headers).json()["sessions"]
        assert [s["id"] for s in listed] == [first["id"]]

    def test_sessions_are_private(self, client, auth_headers):
        session = _new_session(client, auth_headers)
        other = client.post("/auth/register", json={"email": "eve@example.com", "password": "secret123"})
        other_headers = {"Authorization": f"Bearer {other.json()['token']}"}

        assert client.get(f"/sessions/{session['id']}", headers=other_headers).status_code == 404
        assert client.get("/sessions", headers=other_headers).json()["sessions"] == []

    def test_add_message_and_update_code(self, client, auth_headers):
        session = _new_session(client, auth_headers)
        sid = session["id"]

        added = client.post(f"/sessions/{sid}/messages",
                            json={"role": "user", "content": "  hello  "}, headers=auth_headers)
        assert added.status_code == 201
        assert added.json()["message"]["content"] == "hello"

        bad_role = client.post(f"/sessions/{sid}/messages",
                               json={"role": "system", "content": "x"}, headers=auth_headers)
        assert bad_role.status_code == 422

        code = client.put(f"/sessions/{sid}/code", json={"markup": "<div/>"}, headers=auth_headers)
        assert code.status_code == 200
        assert code.json()["generated_code"]["markup"] == "<div/>"
        assert code.json()["generated_code"]["stylesheet"] == ""

        stored = client.get(f"/sessions/{sid}", headers=auth_headers).json()["session"]
        assert stored["message_count"] == 1

    def test_export_zip(self, client, auth_headers):
        session = _new_session(client, auth_headers, "Red Button")
        sid = session["id"]
        assert client.get(f"/sessions/{sid}/export", headers=auth_headers).status_code == 404

        client.put(f"/sessions/{sid}/code",
                   json={"markup": "<button/>", "stylesheet": "button {}"}, headers=auth_headers)
        response = client.get(f"/sessions/{sid}/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="red-button.zip"' in response.headers["content-disposition"]
        archive = zipfile.ZipFile(io.BytesIO(response.content))
        assert sorted(archive.namelist()) == ["README.md", "component.jsx", "package.json", "styles.css"]
        assert archive.read("component.jsx") == b"<button/>"
        assert archive.read("styles.css") == b"button {}"
        assert json.loads(archive.read("package.json"))["name"] == "red-button-component"


class TestChat:
    """The generation endpoint."""

    def test_first_turn(self, client, auth_headers, use_provider, scripted_provider, both_blocks_reply):
        use_provider(scripted_provider(replies=[both_blocks_reply]))
        session = _new_session(client, auth_headers)

        response = client.post("/chat", json={"message": "make a red button", "sessionId": session["id"]},
                               headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == both_blocks_reply
        assert "RedButton" in data["code"]["markup"]
        assert data["code"]["stylesheet"] == ".red-button { background: red; }"

        stored = client.get(f"/sessions/{session['id']}", headers=auth_headers).json()["session"]
        assert [m["role"] for m in stored["messages"]] == ["user", "assistant"]
        assert stored["generated_code"]["markup"] == data["code"]["markup"]

    def test_snake_case_session_id_accepted(self, client, auth_headers, use_provider, scripted_provider):
        use_provider(scripted_provider(replies=["no code here"]))
        session = _new_session(client, auth_headers)

        response = client.post("/chat", json={"message": "hi", "session_id": session["id"]},
                               headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["code"] == {"markup": "", "stylesheet": ""}

    def test_unknown_session(self, client, auth_headers, use_provider, scripted_provider):
        provider = use_provider(scripted_provider(replies=["unused"]))
        response = client.post("/chat", json={"message": "hi", "sessionId": "deadbeef"},
                               headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"
        assert provider.calls == []

    @pytest.mark.parametrize("message", ["", "x" * 2001])
    def test_invalid_message(self, client, auth_headers, message):
        session = _new_session(client, auth_headers)
        response = client.post("/chat", json={"message": message, "sessionId": session["id"]},
                               headers=auth_headers)
        assert response.status_code == 422

    def test_message_limit_follows_settings(self, make_config):
        with TestClient(create_app(make_config(chat_message_max_length=3000))) as client:
            token = client.post("/auth/register", json={
                "email": "long@example.com", "password": "secret123",
            }).json()["token"]
            headers = {"Authorization": f"Bearer {token}"}
            session = _new_session(client, headers)

            def send(length):
                return client.post("/chat", json={"message": "x" * length, "sessionId": session["id"]},
                                   headers=headers)

            # Within the raised limit the turn reaches generation, which is unconfigured
            assert send(2500).status_code == 503
            assert send(3001).status_code == 422

    def test_blank_message(self, client, auth_headers, use_provider, scripted_provider):
        use_provider(scripted_provider(replies=["unused"]))
        session = _new_session(client, auth_headers)
        response = client.post("/chat", json={"message": "   ", "sessionId": session["id"]},
                               headers=auth_headers)
        assert response.status_code == 422

    def test_provider_failure_is_503_and_changes_nothing(self, client, auth_headers, use_provider,
                                                          scripted_provider):
        use_provider(scripted_provider(error=httpx.ConnectError("upstream secret detail")))
        session = _new_session(client, auth_headers)

        response = client.post("/chat", json={"message": "hi", "sessionId": session["id"]},
                               headers=auth_headers)

        assert response.status_code == 503
        assert "temporarily unavailable" in response.json()["detail"]
        assert "upstream secret detail" not in response.text
        stored = client.get(f"/sessions/{session['id']}", headers=auth_headers).json()["session"]
        assert stored["messages"] == []
        assert stored["generated_code"] is None

    def test_unconfigured_provider_is_503(self, client, auth_headers):
        session = _new_session(client, auth_headers)
        response = client.post("/chat", json={"message": "hi", "sessionId": session["id"]},
                               headers=auth_headers)
        assert response.status_code == 503

    def test_unexpected_error_is_500(self, client, auth_headers, app):
        async def explode(*args, **kwargs):
            raise RuntimeError("disk on fire")

        app.state.orchestrator.handle_turn = explode
        response = client.post("/chat", json={"message": "hi", "sessionId": "abc"}, headers=auth_headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Server error"

    def test_models(self, client, auth_headers, use_provider, scripted_provider):
        assert client.get("/chat/models", headers=auth_headers).status_code == 503

        use_provider(scripted_provider())
        response = client.get("/chat/models", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["models"] == [{"id": "test-model"}]

    def test_models_provider_failure(self, client, auth_headers, use_provider, scripted_provider):
        use_provider(scripted_provider(error=httpx.ConnectError("down")))
        assert client.get("/chat/models", headers=auth_headers).status_code == 503


class TestAppEndpoints:
    """Tests for basic app endpoints."""

    def test_root(self, client):
        data = client.get("/").json()
        assert data["app"] == "Accio AI Playground"
        assert data["status"] == "running"

    def test_health_check(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["llm_configured"] is False

    def test_request_id_header(self, client, auth_headers):
        response = client.get("/sessions", headers=auth_headers)
        assert response.headers.get("x-request-id")

from __future__ import annotations

import json
from typing import AsyncIterator, Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import anthropic_reply
from learnhub.config import Settings, get_settings
from learnhub.main import app
from learnhub.proxy_routes import MISSING_KEY_MESSAGE, get_upstream_client


class Upstream:
    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def proxy():
    state = {"settings": Settings(ANTHROPIC_API_KEY=None), "upstream": None}  # type: ignore[call-arg]

    def configure(settings: Settings, upstream: Optional[Upstream] = None) -> TestClient:
        state["settings"] = settings
        state["upstream"] = upstream or Upstream(lambda request: httpx.Response(200, json=anthropic_reply("hi")))
        return TestClient(app)

    async def override_client() -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(state["upstream"])) as client:
            yield client

    app.dependency_overrides[get_settings] = lambda: state["settings"]
    app.dependency_overrides[get_upstream_client] = override_client
    yield configure
    app.dependency_overrides.clear()


def test_missing_key_is_rejected(proxy) -> None:
    upstream = Upstream(lambda request: httpx.Response(200, json={}))
    client = proxy(Settings(ANTHROPIC_API_KEY=None), upstream)  # type: ignore[call-arg]

    response = client.post("/api/claude", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 400
    assert response.json() == {"error": {"type": "authentication_error", "message": MISSING_KEY_MESSAGE}}
    assert response.headers["access-control-allow-origin"] == "*"
    assert upstream.requests == []


def test_messages_are_required(proxy) -> None:
    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"))  # type: ignore[call-arg]

    response = client.post("/api/claude", json={"messages": []})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "invalid_request"


def test_forwards_with_environment_key_and_defaults(proxy) -> None:
    upstream = Upstream(lambda request: httpx.Response(200, json=anthropic_reply("hello")))
    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"), upstream)  # type: ignore[call-arg]

    response = client.post(
        "/api/claude",
        json={"apiKey": "sk-ant-client", "messages": [{"role": "user", "content": "hi"}]},
    )

    assert response.status_code == 200
    assert response.json()["content"][0]["text"] == "hello"
    forwarded = upstream.requests[0]
    assert forwarded.headers["x-api-key"] == "sk-ant-server"
    assert forwarded.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(forwarded.content)
    assert body == {
        "model": "claude-3-5-sonnet-20241022",
        "max_tokens": 4000,
        "messages": [{"role": "user", "content": "hi"}],
    }
    assert "apiKey" not in body


def test_request_key_used_when_environment_has_none(proxy) -> None:
    upstream = Upstream(lambda request: httpx.Response(200, json=anthropic_reply("hello")))
    client = proxy(Settings(ANTHROPIC_API_KEY=None), upstream)  # type: ignore[call-arg]

    client.post(
        "/api/claude",
        json={"apiKey": "sk-ant-client", "model": "custom-model", "max_tokens": 10, "messages": [{"role": "user"}]},
    )

    forwarded = upstream.requests[0]
    assert forwarded.headers["x-api-key"] == "sk-ant-client"
    assert json.loads(forwarded.content)["model"] == "custom-model"
    assert json.loads(forwarded.content)["max_tokens"] == 10


def test_upstream_error_status_is_relayed(proxy) -> None:
    error_body = {"type": "error", "error": {"type": "rate_limit_error", "message": "Slow down"}}
    upstream = Upstream(lambda request: httpx.Response(429, json=error_body))
    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"), upstream)  # type: ignore[call-arg]

    response = client.post("/api/claude", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 429
    assert response.json() == error_body


def test_transport_failure_becomes_server_error(proxy) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"), Upstream(refuse))  # type: ignore[call-arg]

    response = client.post("/api/claude", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 500
    assert response.json() == {"error": {"type": "server_error", "message": "connection refused"}}


def test_preflight_and_other_methods(proxy) -> None:
    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"))  # type: ignore[call-arg]

    preflight = client.options("/api/claude")
    assert preflight.status_code == 200
    assert "POST" in preflight.headers["access-control-allow-methods"]

    for method in ("GET", "PUT", "DELETE"):
        response = client.request(method, "/api/claude")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


def test_healthz_reports_credential(proxy) -> None:
    client = proxy(Settings(ANTHROPIC_API_KEY="sk-ant-server"))  # type: ignore[call-arg]
    assert client.get("/healthz").json() == {"status": "ok", "credential_configured": True}

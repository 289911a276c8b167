try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from campaign_analyst.clients.google_auth import AuthenticatedUser
from campaign_analyst.clients.history_api import (
    HistoryApiClient,
    HistoryApiError,
    SessionCredentials,
    SessionExpiredError,
)
from campaign_analyst.core.config import get_settings
from campaign_analyst.schemas import ChatMessage

pytestmark = pytest.mark.anyio("asyncio")

ENTRY = {
    "id": "entry-1",
    "userId": "user-1",
    "timestamp": "2024-03-01T12:00:00+00:00",
    "inputs": {"tacticName": "SEM", "kpiName": "CTR"},
    "results": {
        "analysisHtml": "<p>Summary</p>",
        "chatMessages": [
            {"role": "user", "content": "Hi", "timestamp": "2024-03-01T12:01:00+00:00"}
        ],
    },
}


def _credentials() -> SessionCredentials:
    return SessionCredentials(token="id-token", user=AuthenticatedUser(sub="user-1"))


def _client(handler, credentials: SessionCredentials | None = None) -> HistoryApiClient:
    return HistoryApiClient(
        "http://testserver/",
        credentials or _credentials(),
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


async def test_fetch_history_sends_bearer_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": "ok", "data": [ENTRY]})

    entries = await _client(handler).fetch_history()

    assert [entry.id for entry in entries] == ["entry-1"]
    assert entries[0].results.chat_messages[0].content == "Hi"
    assert seen[0].url.path == "/api/history"
    assert seen[0].headers["Authorization"] == "Bearer id-token"


@pytest.mark.parametrize("status", [401, 403])
async def test_auth_failures_clear_the_session(status):
    credentials = _credentials()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "Authentication failed: Token expired"})

    with pytest.raises(SessionExpiredError) as excinfo:
        await _client(handler, credentials).fetch_history()

    assert "sign in again" in excinfo.value.user_message
    assert credentials.token is None
    assert credentials.user is None
    assert credentials.signed_in is False


async def test_requests_without_credentials_fail_fast():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - not reached
        raise AssertionError("no request expected")

    with pytest.raises(SessionExpiredError):
        await _client(handler, SessionCredentials()).clear_history()


async def test_append_chat_message_sends_observed_plus_new_message():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"message": "Chat history updated."})

    observed = [ChatMessage(role="user", content="Hi")]
    message = ChatMessage(role="assistant", content="Hello")

    messages = await _client(handler).append_chat_message("entry-1", observed, message)

    assert [item.content for item in messages] == ["Hi", "Hello"]
    assert [item["content"] for item in bodies[0]["chatMessages"]] == ["Hi", "Hello"]
    assert bodies[0]["chatMessages"][1]["role"] == "assistant"


async def test_server_errors_are_translated():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "boom"})

    with pytest.raises(HistoryApiError) as excinfo:
        await _client(handler).delete_entry("entry-1")

    assert excinfo.value.status_code == 500
    assert "having trouble" in excinfo.value.user_message


async def test_network_errors_are_translated():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HistoryApiError) as excinfo:
        await _client(handler).fetch_history()

    assert "internet connection" in excinfo.value.user_message


async def test_clear_history_returns_deleted_count():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(200, json={"message": "Deleted", "deleted": 3})

    assert await _client(handler).clear_history() == 3


async def test_fetch_history_uses_configured_timeout(monkeypatch):
    monkeypatch.setenv("HISTORY_FETCH_TIMEOUT", "2.5")
    get_settings.cache_clear()
    timeouts: dict[str, dict] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        timeouts[request.method] = request.extensions["timeout"]
        if request.method == "GET":
            return httpx.Response(200, json={"message": "ok", "data": []})
        return httpx.Response(200, json={"message": "ok", "deleted": 0})

    client = HistoryApiClient.from_settings(
        "http://testserver",
        _credentials(),
        transport=httpx.MockTransport(handler),
    )
    await client.fetch_history()
    await client.clear_history()

    assert timeouts["GET"]["read"] == 2.5
    assert timeouts["DELETE"]["read"] != 2.5

"""Integration tests for the per-request unit of work."""

import asyncio
import json

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

pytestmark = pytest.mark.integration


async def call_asgi(app, method: str, path: str, headers: dict, body: bytes, events: list) -> None:
    """Drive the app with raw ASGI messages, noting when the response goes out."""
    finished = asyncio.Event()
    sent_request = False

    async def receive():
        nonlocal sent_request
        if not sent_request:
            sent_request = True
            return {"type": "http.request", "body": body, "more_body": False}
        await finished.wait()
        return {"type": "http.disconnect"}

    async def send(message):
        if message["type"] == "http.response.start":
            events.append(f"status {message['status']}")
        elif message["type"] == "http.response.body" and not message.get("more_body", False):
            events.append("response_sent")
            finished.set()

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "root_path": "",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": ("127.0.0.1", 50000),
        "server": ("test", 80),
    }
    await app(scope, receive, send)


async def test_commit_happens_before_response_is_sent(app, admin_headers, monkeypatch):
    events = []
    original_commit = AsyncSession.commit

    async def recording_commit(self):
        events.append("commit")
        await original_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", recording_commit)

    body = json.dumps({"name": "edge-1", "url": "http://edge-1.local:8080"}).encode()
    headers = {**admin_headers, "Content-Type": "application/json", "Host": "test"}
    await call_asgi(app, "POST", "/api/agents", headers, body, events)

    assert events[0] == "status 201"
    assert "commit" in events
    assert events.index("commit") < events.index("response_sent")


async def test_failed_request_is_not_committed(client, admin_headers, monkeypatch):
    events = []
    original_commit = AsyncSession.commit

    async def recording_commit(self):
        events.append("commit")
        await original_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", recording_commit)

    response = await client.delete("/api/agents/does-not-exist", headers=admin_headers)

    assert response.status_code == 404
    assert events == []

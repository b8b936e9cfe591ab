"""
Tests for the remote audit logger.

The log API and auth endpoint are replaced with an httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest

from shortlink.core.exceptions import AuditLogError
from shortlink.services.audit_logger import AuditLogger, validate_entry

AUTH_URL = "http://auth.test/token"
LOG_API_URL = "http://logs.test/logs"


class FakeLogAPI:
    """Records requests and answers like the auth and log endpoints."""

    def __init__(self, log_status: int = 200, auth_status: int = 200, auth_body: dict = None):
        self.log_status = log_status
        self.auth_status = auth_status
        self.auth_body = auth_body if auth_body is not None else {"access_token": "tok-1", "expires_in": 600}
        self.auth_calls = 0
        self.entries = []
        self.auth_headers = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == AUTH_URL:
            self.auth_calls += 1
            return httpx.Response(self.auth_status, json=self.auth_body)
        if str(request.url) == LOG_API_URL:
            self.entries.append(json.loads(request.content))
            self.auth_headers.append(request.headers.get("Authorization"))
            return httpx.Response(self.log_status, json={"logID": "1"})
        return httpx.Response(404)


def make_logger(api: FakeLogAPI, **kwargs) -> AuditLogger:
    client = httpx.AsyncClient(transport=httpx.MockTransport(api))
    return AuditLogger(AUTH_URL, LOG_API_URL, credentials={"clientID": "id"}, client=client, **kwargs)


class TestValidateEntry:

    def test_valid_entries(self):
        validate_entry("backend", "info", "service")
        validate_entry("backend", "ERROR", "utils")
        validate_entry("frontend", "warn", "component")

    @pytest.mark.parametrize("stack,level,package", [
        ("mobile", "info", "service"),
        ("backend", "verbose", "service"),
        ("backend", "info", "component"),
        ("frontend", "info", "repository"),
    ])
    def test_invalid_entries(self, stack, level, package):
        with pytest.raises(AuditLogError):
            validate_entry(stack, level, package)


@pytest.mark.asyncio
async def test_log_sends_entry_with_bearer_token():
    api = FakeLogAPI()
    audit_logger = make_logger(api)

    assert await audit_logger.log("backend", "INFO", "route", "Short URL created: docs")

    assert api.auth_calls == 1
    entry = api.entries[0]
    assert entry["stack"] == "backend"
    assert entry["level"] == "info"
    assert entry["package"] == "route"
    assert entry["message"] == "Short URL created: docs"
    assert "timestamp" in entry
    assert api.auth_headers == ["Bearer tok-1"]
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_token_is_cached_until_expiry():
    api = FakeLogAPI()
    audit_logger = make_logger(api)

    await audit_logger.log("backend", "info", "route", "one")
    await audit_logger.log("backend", "info", "route", "two")
    assert api.auth_calls == 1

    # Force expiry
    audit_logger._token_expires_at = audit_logger._token_expires_at.replace(year=2000)
    await audit_logger.log("backend", "info", "route", "three")
    assert api.auth_calls == 2
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_legacy_token_field_and_default_ttl():
    api = FakeLogAPI(auth_body={"token": "legacy"})
    audit_logger = make_logger(api, token_ttl_seconds=120)

    assert await audit_logger.log("backend", "info", "service", "hello")
    assert api.auth_headers == ["Bearer legacy"]
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_failures_are_swallowed():
    auth_down = FakeLogAPI(auth_status=500)
    audit_logger = make_logger(auth_down)
    assert await audit_logger.log("backend", "info", "route", "x") is False
    assert auth_down.entries == []
    await audit_logger.aclose()

    log_down = FakeLogAPI(log_status=503)
    audit_logger = make_logger(log_down)
    assert await audit_logger.log("backend", "info", "route", "x") is False
    await audit_logger.aclose()

    api = FakeLogAPI()
    audit_logger = make_logger(api)
    assert await audit_logger.log("backend", "info", "not-a-package", "x") is False
    assert api.auth_calls == 0
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_network_error_is_swallowed():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    audit_logger = AuditLogger(AUTH_URL, LOG_API_URL, client=client)
    assert await audit_logger.log("backend", "error", "service", "x") is False
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_unauthorized_drops_cached_token():
    api = FakeLogAPI(log_status=401)
    audit_logger = make_logger(api)

    assert await audit_logger.log("backend", "info", "route", "x") is False
    assert audit_logger._token is None
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_emit_is_fire_and_forget():
    api = FakeLogAPI()
    audit_logger = make_logger(api)

    audit_logger.emit("backend", "info", "route", "queued")
    assert api.entries == []

    # Let the scheduled task run
    for _ in range(10):
        await asyncio.sleep(0)
    await audit_logger.aclose()
    assert [entry["message"] for entry in api.entries] == ["queued"]


def test_emit_without_loop_is_dropped():
    api = FakeLogAPI()
    audit_logger = make_logger(api)
    audit_logger.emit("backend", "info", "route", "dropped")
    assert api.entries == []


@pytest.mark.asyncio
async def test_disabled_without_urls():
    audit_logger = AuditLogger(None, None)
    assert not audit_logger.enabled
    assert await audit_logger.log("backend", "info", "route", "x") is False
    audit_logger.emit("backend", "info", "route", "x")
    await audit_logger.aclose()


@pytest.mark.asyncio
async def test_aclose_cancels_and_awaits_stalled_entries():
    async def stall(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(60)
        return httpx.Response(200, json={"access_token": "late"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(stall))
    audit_logger = AuditLogger(AUTH_URL, LOG_API_URL, client=client)
    audit_logger.emit("backend", "info", "route", "stalled")
    tasks = set(audit_logger._pending)
    assert tasks
    await asyncio.sleep(0)

    await audit_logger.aclose(timeout=0.05)

    assert all(task.done() for task in tasks)
    assert all(task.cancelled() for task in tasks)

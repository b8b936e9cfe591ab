"""
Shared fixtures: a controllable clock, a store, a service and an API client.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from shortlink.core.setting import Settings
from shortlink.main import create_app
from shortlink.services.link_service import ShortLinkService
from shortlink.store.memory_store import InMemoryLinkStore

BASE_URL = "http://short.test"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryLinkStore:
    return InMemoryLinkStore(clock=clock)


@pytest.fixture
def service(store) -> ShortLinkService:
    return ShortLinkService(store=store, base_url=BASE_URL)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        BASE_URL=BASE_URL,
        AUTH_URL=None,
        LOG_API_URL=None,
        EXPIRY_SWEEP_ENABLED=False,
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app, service):
    """
    API client whose app uses the fake-clock service.

    Startup builds a real service; it is swapped for the fixture's one so
    tests can move time.
    """
    with TestClient(app, follow_redirects=False) as test_client:
        app.state.link_service = service
        yield test_client

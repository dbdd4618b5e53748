"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from propr.config import Settings
from propr.jobs.store import JobStore

CLIENT_KEY = "test-client-key"
AUTH = {"X-Client-Key": CLIENT_KEY}

REVIEW_REQUEST = {
    "organizationUrl": "https://dev.azure.com/acme/",
    "projectId": "p1",
    "repositoryId": "r1",
    "pullRequestId": 7,
    "iterationId": 1,
}


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    return JobStore(clock=clock)


@pytest.fixture
def settings():
    """Plain-HTTP settings with a short job delay."""
    return Settings(
        _env_file=None,
        client_key=CLIENT_KEY,
        reveal_client_key=True,
        http_only=True,
        delay_ms=300,
        simulate="success",
    )


@pytest.fixture
def app(settings):
    """Create a test application instance with its own job store."""
    from propr.main import create_app

    _app = create_app(settings, store=JobStore())
    yield _app
    _app.state.executor.shutdown()


@pytest.fixture
async def client(app):
    """Async HTTP test client; requests carry no client key unless given."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

"""
Notekeeper API - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh for each test):
    ├── clock: Controllable epoch-seconds clock for the rate limiter
    ├── utc_clock: Controllable datetime clock for note timestamps
    ├── store: Empty NoteStore on utc_clock
    ├── limiter: 5 requests / 60s limiter on clock
    ├── service: NoteService over store + limiter
    └── test_client: HTTPX AsyncClient wired to `service`
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "5"
os.environ["RATE_LIMIT_WINDOW"] = "60"

from notekeeper.services.note_service import NoteService, get_note_service  # noqa: E402
from notekeeper.services.rate_limiter import SlidingWindowRateLimiter  # noqa: E402
from notekeeper.store import NoteStore  # noqa: E402


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUtcClock:
    """
    Datetime clock that moves forward one millisecond per reading, so every
    create/update gets a distinct, increasing timestamp.
    """

    def __init__(self, start: datetime = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)):
        self.now = start
        self.step = timedelta(milliseconds=1)

    def __call__(self) -> datetime:
        self.now += self.step
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def utc_clock():
    return FakeUtcClock()


@pytest.fixture
def store(utc_clock):
    return NoteStore(clock=utc_clock)


@pytest.fixture
def limiter(clock):
    return SlidingWindowRateLimiter(limit=5, window=60, clock=clock)


@pytest.fixture
def service(store, limiter):
    return NoteService(store=store, limiter=limiter)


@pytest_asyncio.fixture
async def test_client(service):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The app's `get_note_service` dependency is overridden with the per-test
    `service`, so every test starts with no notes and an empty limiter.
    """
    from notekeeper.main import app

    app.dependency_overrides[get_note_service] = lambda: service
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()

"""
Shared test configuration and fixtures.

Settings are read once and cached, so the environment is prepared here
before anything from blogpad is imported: every test runs against an
in-memory SQLite database whose tables are rebuilt per test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

import blogpad.models  # noqa: F401,E402
from blogpad.database import Base, SessionLocal, engine  # noqa: E402
from blogpad.editor.client import BlogClient  # noqa: E402
from blogpad.main import app  # noqa: E402


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer it creates."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """TestClient with its own cookie jar, like a single browser."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def other_client():
    """A second browser with no cookies."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api(client):
    """BlogClient talking to the app in-process."""
    return BlogClient(http=client)


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def signed_in(client):
    """Client holding a session cookie for a freshly signed-up user."""
    response = client.post(
        "/api/v1/users/signup",
        json={"username": "alice", "email": "a@x.com", "password": "secret1"},
    )
    assert response.status_code == 201
    return client

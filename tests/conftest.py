"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from task_manager.database import Database
from task_manager.db import tasks as task_store
from task_manager.main import create_app


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(task_store, "now_ms", fake)
    return fake


@pytest.fixture
def client(database):
    app = create_app(database=database)
    with TestClient(app) as c:
        yield c


def signup(client: TestClient, email: str, password: str = "secret-pass") -> dict:
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    # Only the bearer header is used for auth in tests.
    client.cookies.clear()
    return {
        "user_id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest.fixture
def alice(client):
    return signup(client, "alice@example.com")


@pytest.fixture
def bob(client):
    return signup(client, "bob@example.com")

"""Pytest configuration and fixtures"""

import os

# Settings are read at import time; give the app registration test values
os.environ.setdefault("AZURE_TENANT_ID", "test-tenant")
os.environ.setdefault("AZURE_CLIENT_ID", "test-client")
os.environ.setdefault("AZURE_CLIENT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from graph_calendar.auth.scopes import AuthenticatedUser, get_current_user
from graph_calendar.graph.dto import MailboxSettings
from graph_calendar.graph.graph_client import get_graph_client
from graph_calendar.main import app


class FakeGraphClient:
    """Records calls the routes make instead of talking to Graph."""

    def __init__(self, time_zone="Pacific Standard Time", events=None):
        self.time_zone = time_zone
        self.events = events or []
        self.fail_with = None
        self.calls = []
        self.created = []

    async def get_mailbox_settings(self):
        self.calls.append(("get_mailbox_settings",))
        if self.fail_with is not None:
            raise self.fail_with
        return MailboxSettings(time_zone=self.time_zone)

    async def get_calendar_view(self, start, end, time_zone):
        self.calls.append(("get_calendar_view", start, end, time_zone))
        return self.events

    async def create_event(self, event):
        self.calls.append(("create_event",))
        self.created.append(event)
        return {"id": "new-event-id"}


@pytest.fixture
def fake_graph():
    return FakeGraphClient()


@pytest.fixture
def make_user():
    def _make(scopes=("access_as_user",)):
        return AuthenticatedUser(
            id="00000000-0000-0000-0000-000000000001",
            name="Adele Vance",
            scopes=list(scopes),
            token="incoming-user-token",
        )
    return _make


@pytest.fixture
def client_as(fake_graph):
    """Test client authenticated as the given user, with Graph faked out."""
    def _client(user):
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_graph_client] = lambda: fake_graph
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Test client with no dependency overrides."""
    yield TestClient(app)
    app.dependency_overrides.clear()

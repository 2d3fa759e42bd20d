"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from models import Event, NewEvent
from repo_events import EventStore
from service_events import EventService


class InMemoryEventStore(EventStore):
    """EventStore keeping rows in a dict, with a ticking creation clock."""

    def __init__(self):
        self.rows: dict[UUID, Event] = {}
        self.pings = 0
        self._ticks = itertools.count()

    def insert_event(self, event: NewEvent) -> Event:
        now = datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._ticks))
        stored = Event(id=uuid4(), created_at=now, updated_at=now, **event.model_dump())
        self.rows[stored.id] = stored
        return stored

    def fetch_event(self, event_id: UUID) -> Event | None:
        return self.rows.get(event_id)

    def fetch_events(self) -> list[Event]:
        return sorted(self.rows.values(), key=lambda e: e.created_at)

    def ping(self) -> None:
        self.pings += 1


class FailingEventStore(EventStore):
    """EventStore whose every call fails like an unreachable database."""

    def insert_event(self, event):
        raise RuntimeError("connection refused")

    def fetch_event(self, event_id):
        raise RuntimeError("connection refused")

    def fetch_events(self):
        raise RuntimeError("connection refused")

    def ping(self):
        raise RuntimeError("connection refused")


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def service(store) -> EventService:
    return EventService(store)


@pytest.fixture
def failing_service() -> EventService:
    return EventService(FailingEventStore())


@pytest.fixture
def launch_party() -> dict:
    """Draft as the browser sends it (camelCase, ISO strings)."""
    return {
        "name": "Launch Party",
        "startTime": "2025-06-01T18:00:00Z",
        "endTime": "2025-06-01T21:00:00Z",
        "backgroundStyle": {"type": "solid", "colors": ["#FF5733"]},
        "isPublic": True,
        "requireApproval": False,
    }


def _client_for(svc: EventService):
    from main import app, get_service

    app.dependency_overrides[get_service] = lambda: svc
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    yield from _client_for(service)


@pytest.fixture
def failing_client(failing_service):
    yield from _client_for(failing_service)

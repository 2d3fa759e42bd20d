"""Tests for EventRepo against a mocked psycopg connection."""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg.types.json import Jsonb

from models import Location, NewEvent
from repo_events import EventRepo

START = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)
END = datetime(2025, 6, 1, 21, 0, tzinfo=timezone.utc)
CREATED = datetime(2025, 5, 1, 9, 0, tzinfo=timezone.utc)


def make_row(event_id=None, name="Launch Party", location=None, capacity=None):
    return (
        event_id or uuid4(),
        name,
        None,
        START,
        END,
        location,
        {"type": "solid", "colors": ["#FF5733"]},
        True,
        False,
        capacity,
        CREATED,
        CREATED,
    )


@pytest.fixture
def conn():
    """Connection mock usable as `with conn:` and `with conn.cursor() as cur:`."""
    conn = MagicMock()
    conn.__enter__.return_value = conn
    conn.__exit__.return_value = False
    cursor_cm = conn.cursor.return_value
    cursor_cm.__exit__.return_value = False
    return conn


@pytest.fixture
def cur(conn):
    return conn.cursor.return_value.__enter__.return_value


@pytest.fixture
def repo(conn):
    return EventRepo(connect=lambda: conn)


@pytest.fixture
def new_event():
    return NewEvent(
        name="Launch Party",
        start_time=START,
        end_time=END,
        background_style={"type": "solid", "colors": ["#FF5733"]},
    )


def test_insert_event_writes_jsonb_and_commits(repo, conn, cur, new_event):
    row = make_row()
    cur.fetchone.return_value = row

    event = repo.insert_event(new_event)

    sql, params = cur.execute.call_args[0]
    assert sql.startswith("INSERT INTO events")
    assert "RETURNING" in sql
    assert params[0] == "Launch Party"
    assert params[4] is None
    assert isinstance(params[5], Jsonb)
    assert params[5].obj == {"type": "solid", "colors": ["#FF5733"]}
    conn.commit.assert_called_once()
    assert event.id == row[0]
    assert event.created_at == CREATED


def test_insert_event_drops_missing_coordinates(repo, cur, new_event):
    cur.fetchone.return_value = make_row(location={"address": "Main St 1"})
    new_event = new_event.model_copy(update={"location": Location(address="Main St 1")})

    event = repo.insert_event(new_event)

    params = cur.execute.call_args[0][1]
    assert params[4].obj == {"address": "Main St 1"}
    assert event.location.address == "Main St 1"


def test_fetch_event_maps_row(repo, cur):
    event_id = uuid4()
    cur.fetchone.return_value = make_row(event_id=event_id, capacity=50)

    event = repo.fetch_event(event_id)

    assert cur.execute.call_args[0][1] == (event_id,)
    assert event.id == event_id
    assert event.capacity == 50
    assert event.background_style.type == "solid"


def test_fetch_event_missing(repo, cur):
    cur.fetchone.return_value = None
    assert repo.fetch_event(uuid4()) is None


def test_fetch_events_orders_by_creation(repo, cur):
    cur.fetchall.return_value = [make_row(name="a"), make_row(name="b")]

    events = repo.fetch_events()

    assert "ORDER BY created_at ASC" in cur.execute.call_args[0][0]
    assert [e.name for e in events] == ["a", "b"]


def test_errors_propagate(repo, cur, new_event):
    cur.execute.side_effect = RuntimeError("connection reset")
    with pytest.raises(RuntimeError):
        repo.insert_event(new_event)


def test_ping(repo, cur):
    repo.ping()
    cur.execute.assert_called_once_with("SELECT 1;")

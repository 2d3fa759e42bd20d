"""
Repository: SQL operations for `events`.

This file contains only DB interaction code. It maps `NewEvent` models to
SQL parameters and DB rows back to `Event` models. Keep business rules
out of this module; validation and error mapping live in
`service_events.py`.

Important notes:
- SQL strings use positional parameters for psycopg.
- `location` and `background_style` are wrapped in `Jsonb` so Postgres
  stores native JSONB; an absent location is written as NULL.
- `id`, `created_at` and `updated_at` come from column defaults and are
  read back with `RETURNING`.
- `insert_event` commits before returning; callers expect the write to be
  durable once the method returns.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence
from uuid import UUID

import psycopg
from psycopg.types.json import Jsonb

from db import get_conn
from models import Event, NewEvent

COLUMNS = (
    "id, name, description, start_time, end_time, location, background_style, "
    "is_public, require_approval, capacity, created_at, updated_at"
)


class EventStore(ABC):
    """Interface for event persistence. Implementations raise on failure."""

    @abstractmethod
    def insert_event(self, event: NewEvent) -> Event:
        """Write one event and return it with its generated id and timestamps."""
        ...

    @abstractmethod
    def fetch_event(self, event_id: UUID) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def fetch_events(self) -> list[Event]:
        """Return all events ordered by created_at ascending."""
        ...

    @abstractmethod
    def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...


def _row_to_event(row: Sequence[Any]) -> Event:
    return Event(
        id=row[0],
        name=row[1],
        description=row[2],
        start_time=row[3],
        end_time=row[4],
        location=row[5],
        background_style=row[6],
        is_public=row[7],
        require_approval=row[8],
        capacity=row[9],
        created_at=row[10],
        updated_at=row[11],
    )


class EventRepo(EventStore):
    """DB access only. No business logic here.

    `connect` is any zero-argument callable returning a psycopg connection
    usable as a context manager; it defaults to `db.get_conn`.
    """

    def __init__(self, connect: Callable[[], psycopg.Connection] = get_conn):
        self._connect = connect

    def insert_event(self, event: NewEvent) -> Event:
        location = None
        if event.location is not None:
            location = Jsonb(event.location.model_dump(exclude_none=True))

        params = (
            event.name,
            event.description,
            event.start_time,
            event.end_time,
            location,
            Jsonb(event.background_style.model_dump()),
            event.is_public,
            event.require_approval,
            event.capacity,
        )
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO events (name, description, start_time, end_time, location, "
                    "background_style, is_public, require_approval, capacity) "
                    f"VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING {COLUMNS}",
                    params,
                )
                row = cur.fetchone()
            conn.commit()
        return _row_to_event(row)

    def fetch_event(self, event_id: UUID) -> Event | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {COLUMNS} FROM events WHERE id=%s",
                    (event_id,),
                )
                row = cur.fetchone()
        return _row_to_event(row) if row is not None else None

    def fetch_events(self) -> list[Event]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {COLUMNS} FROM events ORDER BY created_at ASC")
                return [_row_to_event(r) for r in cur.fetchall()]

    def ping(self) -> None:
        """Lightweight DB health check. Raises on error."""

        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")

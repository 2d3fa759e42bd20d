"""
Database connection helper.

This module centralizes how connections are created. `get_conn()` opens a
new psycopg connection per call; `EventRepo` receives it as its connection
factory so tests can hand the repository a fake instead.

Usage:
    from db import get_conn
    with get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
"""

import psycopg
from settings import settings


def get_conn(db_url: str | None = None) -> psycopg.Connection:
    """Return a new psycopg connection, by default to `settings.db_url`.

    A short `connect_timeout` keeps HTTP requests from hanging when the
    database is unreachable.
    """

    return psycopg.connect(
        db_url or settings.db_url, connect_timeout=settings.db_connect_timeout
    )

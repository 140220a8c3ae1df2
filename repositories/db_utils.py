"""Database helper utilities for the leaderboard store."""
from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2.extras import RealDictCursor

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name or ""))


@contextmanager
def db_connection(dsn: str) -> Iterator[psycopg2.extensions.connection]:
    conn = psycopg2.connect(dsn)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def dict_cursor(conn: psycopg2.extensions.connection) -> Iterator[RealDictCursor]:
    cursor = conn.cursor(cursor_factory=RealDictCursor)
    try:
        yield cursor
    finally:
        cursor.close()

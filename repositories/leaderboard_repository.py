"""PostgreSQL storage for leaderboard records."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from scoring.errors import ConfigurationError
from scoring.models import MergeResult, ScoreRecord
from scoring.service import DEFAULT_TOP_LIMIT, ScoreStore

from .db_utils import db_connection, dict_cursor, is_valid_identifier
from .memory_store import MemoryScoreStore

log = logging.getLogger(__name__)

DEFAULT_TABLE = "leaderboard"
MEMORY_URL_PREFIX = "memory:"

# Deterministic tie order: the earlier achiever ranks first.
RANK_ORDER = "score DESC, recorded_at ASC, name ASC"


class LeaderboardRepository:
    """Ranking store backed by a single table keyed by player name."""

    def __init__(self, dsn: str, *, table: str = DEFAULT_TABLE):
        if not is_valid_identifier(table):
            raise ConfigurationError(f"Invalid table name: {table!r}")
        self.dsn = dsn
        self.table = table

    def ensure_table(self) -> None:
        """Create the leaderboard table and its ranking index if missing."""
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            cur.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    name TEXT PRIMARY KEY,
                    score BIGINT NOT NULL,
                    recorded_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            cur.execute(
                f"CREATE INDEX IF NOT EXISTS {self.table}_rank_idx ON {self.table} (score DESC, recorded_at ASC)"
            )
            conn.commit()

    def fetch_top(self, limit: int = DEFAULT_TOP_LIMIT) -> List[ScoreRecord]:
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            cur.execute(
                f"SELECT name, score, recorded_at FROM {self.table} ORDER BY {RANK_ORDER} LIMIT %s",
                (int(limit),),
            )
            rows = cur.fetchall()
        return [ScoreRecord.from_row(row) for row in rows or []]

    def get(self, name: str) -> Optional[ScoreRecord]:
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            cur.execute(
                f"SELECT name, score, recorded_at FROM {self.table} WHERE name = %s",
                (name,),
            )
            row = cur.fetchone()
        return ScoreRecord.from_row(row) if row else None

    def merge_score(self, name: str, score: int, recorded_at: datetime) -> MergeResult:
        """Insert the record or raise its score in one conditional statement.

        The ``WHERE`` on the conflict branch makes the compare-and-set atomic;
        no row comes back when the stored score is already as high.
        ``xmax = 0`` is true only for freshly inserted tuples.
        """
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            try:
                cur.execute(
                    f"""
                    INSERT INTO {self.table} (name, score, recorded_at)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (name) DO UPDATE SET
                        score = EXCLUDED.score,
                        recorded_at = EXCLUDED.recorded_at
                    WHERE {self.table}.score < EXCLUDED.score
                    RETURNING (xmax = 0) AS inserted
                    """,
                    (name, int(score), recorded_at),
                )
                row = cur.fetchone()
                conn.commit()
            except Exception:
                conn.rollback()
                raise
        if not row:
            return MergeResult.NOT_IMPROVED
        return MergeResult.INSERTED if row["inserted"] else MergeResult.UPDATED

    def upsert(self, name: str, score: int, recorded_at: datetime) -> bool:
        return self.merge_score(name, score, recorded_at).written

    def count(self) -> int:
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            cur.execute(f"SELECT COUNT(*) AS total FROM {self.table}")
            row = cur.fetchone()
        return int(row["total"]) if row else 0

    def prune(self, keep: int) -> int:
        """Delete every record ranked below the top ``keep``."""
        with db_connection(self.dsn) as conn, dict_cursor(conn) as cur:
            cur.execute(
                f"""
                DELETE FROM {self.table}
                WHERE name NOT IN (
                    SELECT name FROM {self.table} ORDER BY {RANK_ORDER} LIMIT %s
                )
                """,
                (max(int(keep), 0),),
            )
            deleted = cur.rowcount
            conn.commit()
        log.info("Pruned %s leaderboard rows below the top %s", deleted, keep)
        return deleted


def create_store(database_url: str, *, table: str = DEFAULT_TABLE) -> ScoreStore:
    """Pick the store backend for a database URL."""
    if not database_url or database_url.startswith(MEMORY_URL_PREFIX):
        log.warning("Using in-memory leaderboard store; scores are lost on restart")
        return MemoryScoreStore()
    return LeaderboardRepository(database_url, table=table)

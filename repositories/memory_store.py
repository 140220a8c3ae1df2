"""In-memory score store for local development and tests."""
from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, List, Optional

from scoring.models import MergeResult, ScoreRecord
from scoring.service import DEFAULT_TOP_LIMIT


def _rank_key(record: ScoreRecord):
    return (-record.score, record.recorded_at, record.name)


class MemoryScoreStore:
    """Keeps records in a dict; the lock makes compare-and-set atomic."""

    def __init__(self) -> None:
        self._records: Dict[str, ScoreRecord] = {}
        self._lock = threading.Lock()

    def ensure_table(self) -> None:
        return None

    def fetch_top(self, limit: int = DEFAULT_TOP_LIMIT) -> List[ScoreRecord]:
        with self._lock:
            ranked = sorted(self._records.values(), key=_rank_key)
        return ranked[: max(int(limit), 0)]

    def get(self, name: str) -> Optional[ScoreRecord]:
        with self._lock:
            return self._records.get(name)

    def merge_score(self, name: str, score: int, recorded_at: datetime) -> MergeResult:
        with self._lock:
            existing = self._records.get(name)
            if existing is not None and existing.score >= score:
                return MergeResult.NOT_IMPROVED
            self._records[name] = ScoreRecord(name=name, score=int(score), recorded_at=recorded_at)
        return MergeResult.INSERTED if existing is None else MergeResult.UPDATED

    def upsert(self, name: str, score: int, recorded_at: datetime) -> bool:
        return self.merge_score(name, score, recorded_at).written

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def prune(self, keep: int) -> int:
        with self._lock:
            ranked = sorted(self._records.values(), key=_rank_key)
            dropped = ranked[max(int(keep), 0):]
            for record in dropped:
                del self._records[record.name]
        return len(dropped)

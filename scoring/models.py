"""Value types passed between the store, the pipeline and the web layer."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_utc(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        raise TypeError(f"Unsupported timestamp value: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class ScoreRecord:
    name: str
    score: int
    recorded_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ScoreRecord":
        """Build a record from a DB row; naive timestamps are taken as UTC."""
        return cls(
            name=str(row["name"]),
            score=int(row["score"]),
            recorded_at=_as_utc(row["recorded_at"]),
        )


@dataclass(frozen=True, slots=True)
class Submission:
    name: str
    score: int
    checksum: str


class MergeResult(str, Enum):
    """What a conditional write did to the stored record."""

    INSERTED = "inserted"
    UPDATED = "updated"
    NOT_IMPROVED = "not_improved"

    @property
    def written(self) -> bool:
        return self is not MergeResult.NOT_IMPROVED


class Outcome(str, Enum):
    """Terminal state of a single submission."""

    INSERTED = "inserted"
    UPDATED = "updated"
    NOT_IMPROVED = "not_improved"
    BAD_SIGNATURE = "bad_signature"
    PARSE_ERROR = "parse_error"

    @property
    def updated(self) -> bool:
        return self in (Outcome.INSERTED, Outcome.UPDATED)
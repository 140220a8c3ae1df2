"""Presentation helpers for leaderboard entries."""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .errors import UnknownDisplayField
from .models import ScoreRecord

DEFAULT_TIMESTAMP_FORMAT = "%d-%m-%Y %H:%M:%S"


def format_timestamp(
    value: datetime,
    *,
    tz: tzinfo = timezone.utc,
    fmt: str = DEFAULT_TIMESTAMP_FORMAT,
) -> str:
    """Render an aware timestamp in the display timezone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).strftime(fmt)


def serialize_entry(
    record: ScoreRecord,
    *,
    tz: tzinfo = timezone.utc,
    fmt: str = DEFAULT_TIMESTAMP_FORMAT,
) -> Dict[str, object]:
    return {
        "name": record.name,
        "score": record.score,
        "timestamp": format_timestamp(record.recorded_at, tz=tz, fmt=fmt),
    }


class DisplayField(str, Enum):
    NAME = "name"
    POINTS = "points"
    TIMESTAMP = "timestamp"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def extract(self, record: ScoreRecord, *, tz: tzinfo, fmt: str) -> str:
        return _EXTRACTORS[self](record, tz, fmt)


_LABELS: Dict[DisplayField, str] = {
    DisplayField.NAME: "Name",
    DisplayField.POINTS: "Points",
    DisplayField.TIMESTAMP: "Timestamp",
}

_EXTRACTORS: Dict[DisplayField, Callable[[ScoreRecord, tzinfo, str], str]] = {
    DisplayField.NAME: lambda record, tz, fmt: record.name,
    DisplayField.POINTS: lambda record, tz, fmt: str(record.score),
    DisplayField.TIMESTAMP: lambda record, tz, fmt: format_timestamp(record.recorded_at, tz=tz, fmt=fmt),
}

DEFAULT_FIELDS: Sequence[DisplayField] = (
    DisplayField.NAME,
    DisplayField.POINTS,
    DisplayField.TIMESTAMP,
)


def parse_fields(identifiers: Optional[Iterable[str]]) -> List[DisplayField]:
    """Map case-insensitive identifiers to display fields.

    An empty or missing selection means all fields. Unknown identifiers raise
    ``UnknownDisplayField`` instead of being rendered as blanks.
    """
    fields: List[DisplayField] = []
    for identifier in identifiers or ():
        key = identifier.strip().lower()
        try:
            field = DisplayField(key)
        except ValueError as exc:
            raise UnknownDisplayField(identifier) from exc
        if field not in fields:
            fields.append(field)
    return fields or list(DEFAULT_FIELDS)


def render_entry(
    record: ScoreRecord,
    fields: Sequence[DisplayField] = DEFAULT_FIELDS,
    *,
    tz: tzinfo = timezone.utc,
    fmt: str = DEFAULT_TIMESTAMP_FORMAT,
) -> str:
    parts = [f"{field.label}: {field.extract(record, tz=tz, fmt=fmt)}" for field in fields]
    return " - ".join(parts)


def render_board(
    records: Iterable[ScoreRecord],
    fields: Sequence[DisplayField] = DEFAULT_FIELDS,
    *,
    tz: tzinfo = timezone.utc,
    fmt: str = DEFAULT_TIMESTAMP_FORMAT,
) -> List[str]:
    return [
        f"{rank}. {render_entry(record, fields, tz=tz, fmt=fmt)}"
        for rank, record in enumerate(records, start=1)
    ]

"""Submission pipeline and read path shared by the web app and the admin CLI."""
from __future__ import annotations

import logging
import unicodedata
from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol

from .checksum import SubmissionValidator
from .errors import MalformedSubmission
from .models import MergeResult, Outcome, ScoreRecord, Submission, utc_now

log = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 10
DEFAULT_MAX_NAME_LENGTH = 64

# Range of the BIGINT score column.
MIN_SCORE = -(2**63)
MAX_SCORE = 2**63 - 1


class ScoreStore(Protocol):
    def ensure_table(self) -> None: ...

    def fetch_top(self, limit: int = DEFAULT_TOP_LIMIT) -> List[ScoreRecord]: ...

    def get(self, name: str) -> Optional[ScoreRecord]: ...

    def merge_score(self, name: str, score: int, recorded_at: datetime) -> MergeResult: ...

    def upsert(self, name: str, score: int, recorded_at: datetime) -> bool: ...

    def count(self) -> int: ...

    def prune(self, keep: int) -> int: ...


def parse_submission(payload: Any, *, max_name_length: int = DEFAULT_MAX_NAME_LENGTH) -> Submission:
    """Validate the shape of a raw submission body."""
    if not isinstance(payload, dict):
        raise MalformedSubmission("Submission must be a JSON object")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedSubmission("Name is required")
    name = name.strip()
    if len(name) > max_name_length:
        raise MalformedSubmission(f"Name is longer than {max_name_length} characters")
    if any(unicodedata.category(char) == "Cc" for char in name):
        raise MalformedSubmission("Name must not contain control characters")

    score = payload.get("score")
    # bool is an int subclass; JSON true/false is not a score
    if isinstance(score, bool) or not isinstance(score, int):
        raise MalformedSubmission("Score must be an integer")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise MalformedSubmission("Score is out of range")

    checksum = payload.get("checksum", payload.get("signature"))
    if not isinstance(checksum, str):
        raise MalformedSubmission("Checksum is required")

    return Submission(name=name, score=score, checksum=checksum.strip())


class SubmissionService:
    """Admits signed scores into the store and serves the top-N view."""

    def __init__(
        self,
        store: ScoreStore,
        validator: SubmissionValidator,
        *,
        top_limit: int = DEFAULT_TOP_LIMIT,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.validator = validator
        self.top_limit = top_limit
        self.max_name_length = max_name_length
        self._clock = clock

    def top(self) -> List[ScoreRecord]:
        return self.store.fetch_top(self.top_limit)

    def submit(self, payload: Any) -> Outcome:
        """Run one submission through parse, checksum and merge.

        Rejections come back as outcomes. Store failures propagate.
        """
        try:
            submission = parse_submission(payload, max_name_length=self.max_name_length)
        except MalformedSubmission as exc:
            log.warning("Rejected malformed submission: %s", exc)
            return Outcome.PARSE_ERROR

        if not self.validator.is_valid(submission.name, submission.score, submission.checksum):
            log.warning("Rejected submission for %r with bad checksum", submission.name)
            return Outcome.BAD_SIGNATURE

        result = self.store.merge_score(submission.name, submission.score, self._clock())
        if result is MergeResult.INSERTED:
            log.info("Inserted score %s for %r", submission.score, submission.name)
            return Outcome.INSERTED
        if result is MergeResult.UPDATED:
            log.info("Raised score for %r to %s", submission.name, submission.score)
            return Outcome.UPDATED
        log.info("Score %s for %r does not beat the stored one", submission.score, submission.name)
        return Outcome.NOT_IMPROVED

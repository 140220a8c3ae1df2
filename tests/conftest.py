from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from itertools import count

# webapp.main builds its module-level app from the environment on import.
for _key in [key for key in os.environ if key.startswith("LEADERBOARD_")]:
    del os.environ[_key]

import pytest
from fastapi.testclient import TestClient

from repositories.memory_store import MemoryScoreStore
from scoring.checksum import SubmissionValidator
from scoring.service import SubmissionService
from webapp.config import Settings
from webapp.main import create_app

START = datetime(2026, 10, 19, 12, 30, 5, tzinfo=timezone.utc)


class StepClock:
    """Returns START, START + 1s, START + 2s, ... on each call."""

    def __init__(self, start: datetime = START):
        self._ticks = count()
        self.start = start

    def __call__(self) -> datetime:
        return self.start + timedelta(seconds=next(self._ticks))


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store() -> MemoryScoreStore:
    return MemoryScoreStore()


@pytest.fixture
def validator() -> SubmissionValidator:
    return SubmissionValidator()


@pytest.fixture
def service(store, validator, clock) -> SubmissionService:
    return SubmissionService(store, validator, clock=clock)


@pytest.fixture
def sign(validator):
    def _sign(name: str, score: int) -> dict:
        return {"name": name, "score": score, "checksum": validator.compute_signature(name, score)}

    return _sign


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def client(settings, store, clock) -> TestClient:
    app = create_app(settings, store)
    app.state.service._clock = clock
    return TestClient(app)

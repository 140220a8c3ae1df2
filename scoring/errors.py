"""Exception types raised by the leaderboard core."""
from __future__ import annotations


class LeaderboardError(Exception):
    """Base class for leaderboard errors."""


class MalformedSubmission(LeaderboardError):
    """Raised when a submission payload cannot be parsed."""


class UnknownDisplayField(LeaderboardError):
    """Raised when a display field identifier is not recognised."""

    def __init__(self, identifier: str):
        super().__init__(f"Unknown display field: {identifier!r}")
        self.identifier = identifier


class ConfigurationError(LeaderboardError):
    """Raised when settings loaded from the environment are invalid."""

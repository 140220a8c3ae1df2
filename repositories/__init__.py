"""Storage backends for the leaderboard."""

__all__ = [
    "db_utils",
    "leaderboard_repository",
    "memory_store",
]

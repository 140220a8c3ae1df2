"""Leaderboard web service."""

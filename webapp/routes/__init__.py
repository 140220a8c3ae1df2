"""HTTP routes of the leaderboard web service."""

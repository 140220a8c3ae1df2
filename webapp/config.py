"""Configuration helpers for the leaderboard web service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from functools import lru_cache
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from repositories.db_utils import is_valid_identifier
from repositories.leaderboard_repository import DEFAULT_TABLE
from scoring.checksum import DEFAULT_CHECKSUM_LENGTH, MAX_CHECKSUM_LENGTH
from scoring.errors import ConfigurationError
from scoring.formatting import DEFAULT_TIMESTAMP_FORMAT
from scoring.service import DEFAULT_MAX_NAME_LENGTH, DEFAULT_TOP_LIMIT

DEFAULT_DATABASE_URL = "memory://"


def _env(env: Mapping[str, str], name: str, default: Optional[str] = None) -> str:
    value = env.get(name, default)
    return value.strip() if value else (default or "")


def _env_int(env: Mapping[str, str], name: str, default: int, *, minimum: int = 1, maximum: Optional[int] = None) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {name} must be an integer; got {raw!r}") from exc
    if value < minimum or (maximum is not None and value > maximum):
        raise ConfigurationError(f"Environment variable {name} is out of range: {value}")
    return value


def _resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {name!r}") from exc


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    table: str = DEFAULT_TABLE
    top_limit: int = DEFAULT_TOP_LIMIT
    signing_secret: Optional[str] = None
    checksum_length: int = DEFAULT_CHECKSUM_LENGTH
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    local_tz: str = "UTC"
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH

    @property
    def display_tz(self) -> tzinfo:
        return _resolve_timezone(self.local_tz)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables and validate them."""
    env = os.environ if env is None else env
    table = _env(env, "LEADERBOARD_TABLE", DEFAULT_TABLE)
    if not is_valid_identifier(table):
        raise ConfigurationError(f"LEADERBOARD_TABLE is not a valid identifier: {table!r}")
    local_tz = _env(env, "LEADERBOARD_LOCAL_TZ", "UTC")
    _resolve_timezone(local_tz)
    return Settings(
        database_url=_env(env, "LEADERBOARD_DATABASE_URL", DEFAULT_DATABASE_URL),
        table=table,
        top_limit=_env_int(env, "LEADERBOARD_TOP_LIMIT", DEFAULT_TOP_LIMIT),
        signing_secret=env.get("LEADERBOARD_SIGNING_SECRET") or None,
        checksum_length=_env_int(
            env,
            "LEADERBOARD_CHECKSUM_LENGTH",
            DEFAULT_CHECKSUM_LENGTH,
            maximum=MAX_CHECKSUM_LENGTH,
        ),
        timestamp_format=env.get("LEADERBOARD_TIMESTAMP_FORMAT") or DEFAULT_TIMESTAMP_FORMAT,
        local_tz=local_tz,
        max_name_length=_env_int(env, "LEADERBOARD_MAX_NAME_LENGTH", DEFAULT_MAX_NAME_LENGTH),
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return load_settings()

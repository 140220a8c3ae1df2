#!/usr/bin/env python3
"""Maintenance commands for the leaderboard store."""
from __future__ import annotations

import argparse
import logging
from typing import Iterable

from repositories.leaderboard_repository import create_store
from scoring.checksum import SubmissionValidator
from scoring.errors import LeaderboardError
from scoring.formatting import parse_fields, render_board
from webapp.config import Settings, get_settings

log = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Manage the leaderboard store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the leaderboard table if missing")

    top = commands.add_parser("top", help="Print the top entries")
    top.add_argument("--limit", type=int, default=None, help="Number of entries (defaults to LEADERBOARD_TOP_LIMIT)")
    top.add_argument(
        "--fields",
        nargs="+",
        default=None,
        help="Fields to show: name, points, timestamp",
    )

    sign = commands.add_parser("sign", help="Compute the checksum a client must send")
    sign.add_argument("name")
    sign.add_argument("score", type=int)

    prune = commands.add_parser("prune", help="Delete entries ranked below the top N")
    prune.add_argument("--keep", type=int, required=True, help="Number of top entries to keep")

    return parser.parse_args(argv)


def _cmd_init_db(settings: Settings) -> int:
    create_store(settings.database_url, table=settings.table).ensure_table()
    log.info("Leaderboard table %s is ready", settings.table)
    return 0


def _cmd_top(settings: Settings, args: argparse.Namespace) -> int:
    limit = settings.top_limit if args.limit is None else args.limit
    if limit < 0:
        log.error("--limit must not be negative")
        return 2
    fields = parse_fields(args.fields)
    store = create_store(settings.database_url, table=settings.table)
    records = store.fetch_top(limit)
    if not records:
        print("Leaderboard is empty")
        return 0
    for line in render_board(records, fields, tz=settings.display_tz, fmt=settings.timestamp_format):
        print(line)
    return 0


def _cmd_sign(settings: Settings, args: argparse.Namespace) -> int:
    validator = SubmissionValidator(secret=settings.signing_secret, length=settings.checksum_length)
    print(validator.compute_signature(args.name.strip(), args.score))
    return 0


def _cmd_prune(settings: Settings, args: argparse.Namespace) -> int:
    if args.keep < 0:
        log.error("--keep must not be negative")
        return 2
    store = create_store(settings.database_url, table=settings.table)
    deleted = store.prune(args.keep)
    print(f"Deleted {deleted} entries")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)
    try:
        settings = get_settings()
        if args.command == "init-db":
            return _cmd_init_db(settings)
        if args.command == "top":
            return _cmd_top(settings, args)
        if args.command == "sign":
            return _cmd_sign(settings, args)
        return _cmd_prune(settings, args)
    except LeaderboardError as exc:
        log.error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

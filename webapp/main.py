"""FastAPI backend serving the leaderboard."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request

from repositories.leaderboard_repository import create_store
from scoring.checksum import SubmissionValidator
from scoring.service import ScoreStore, SubmissionService

from .config import Settings, get_settings
from .routes.leaderboard import router as leaderboard_router

log = logging.getLogger(__name__)


def configure_logging() -> None:
    """Set up basic logging for the web process."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None, store: Optional[ScoreStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store if store is not None else create_store(settings.database_url, table=settings.table)
    validator = SubmissionValidator(secret=settings.signing_secret, length=settings.checksum_length)
    if not validator.keyed:
        log.warning("LEADERBOARD_SIGNING_SECRET is not set; checksums use a public hash")

    app = FastAPI(title="Edge Leaderboard")
    app.state.settings = settings
    app.state.service = SubmissionService(
        store,
        validator,
        top_limit=settings.top_limit,
        max_name_length=settings.max_name_length,
    )
    app.include_router(leaderboard_router)

    @app.middleware("http")
    async def _allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.on_event("startup")
    def _startup_ensure_table() -> None:
        """Create the leaderboard table before the first request."""
        try:
            store.ensure_table()
        except Exception as exc:  # pylint: disable=broad-except
            log.warning("Failed to ensure leaderboard table on startup: %s", exc)

    @app.get("/api/health")
    def api_health():
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()

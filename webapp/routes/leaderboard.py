"""Public leaderboard endpoints: read the top entries and submit scores."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from scoring.formatting import serialize_entry
from scoring.models import Outcome
from scoring.service import SubmissionService

from ..config import Settings
from ..dependencies import get_app_settings, get_service

log = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

FETCH_ERROR = "Failed to fetch scores."
UPDATE_ERROR = "Failed to update score."
ALLOWED_METHODS = "GET, POST"
ALLOWED_HEADERS = "Content-Type"


def _json_error(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("")
def api_leaderboard(
    service: SubmissionService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
):
    try:
        records = service.top()
    except Exception:  # pylint: disable=broad-except
        log.exception("Failed to load leaderboard")
        return _json_error(FETCH_ERROR)

    tz = settings.display_tz
    return [serialize_entry(record, tz=tz, fmt=settings.timestamp_format) for record in records]


@router.post("")
async def api_submit_score(request: Request, service: SubmissionService = Depends(get_service)):
    try:
        payload = await request.json()
    except ValueError:
        log.warning("Rejected submission with unreadable JSON body")
        return _json_error(UPDATE_ERROR)

    try:
        outcome = await run_in_threadpool(service.submit, payload)
    except Exception:  # pylint: disable=broad-except
        log.exception("Failed to update leaderboard")
        return _json_error(UPDATE_ERROR)

    if outcome is Outcome.PARSE_ERROR:
        return _json_error(UPDATE_ERROR)
    return {"updated": outcome.updated}


@router.options("")
def api_leaderboard_options() -> Response:
    return Response(
        status_code=status.HTTP_200_OK,
        headers={
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        },
    )

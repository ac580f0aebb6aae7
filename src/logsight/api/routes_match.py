"""
Match route handlers.

Endpoints:
- GET /health: health check
- GET /api/summary: map, winner, lengths, score and per-team player tables
- GET /api/rounds: round-by-round outcomes with running score
- GET /api/scoreboard: raw cumulative score progression
- GET /api/debug/round-outcomes: round outcomes without the envelope
- POST /api/analyze: reconstruct an uploaded log and return all of the above
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile

from logsight import __version__
from logsight.analysis.models import MatchModel
from logsight.analysis.reconstruct import NoMatchStartFound, build_match
from logsight.analysis.summary import build_round_outcomes, build_scoreboard, build_summary
from logsight.api.shared import (
    ALLOWED_EXTENSIONS,
    AnalyzeResponse,
    HealthResponse,
    RoundOutcomeModel,
    RoundsResponse,
    ScoreboardRowModel,
    SummaryResponse,
    no_match_start_error,
)
from logsight.core.parser import parse_lines

logger = logging.getLogger(__name__)

router = APIRouter(tags=["match"])


def _get_match_store():
    """Lazy import to avoid circular dependency."""
    from logsight.api import match_store

    return match_store


def _current_match() -> MatchModel:
    store = _get_match_store()
    try:
        return store.get()
    except FileNotFoundError as e:
        logger.warning(f"Match log not found: {store.log_path}")
        raise HTTPException(status_code=404, detail=f"Match log not found: {store.log_path}") from e
    except NoMatchStartFound as e:
        logger.warning(f"Match log has no match start: {store.log_path}")
        raise no_match_start_error(e) from e


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@router.get("/api/summary", response_model=SummaryResponse)
def get_summary():
    """Match summary for the configured log."""
    return build_summary(_current_match())


@router.get("/api/rounds", response_model=RoundsResponse)
def get_rounds():
    """Round-by-round outcomes and the halftime round."""
    return build_round_outcomes(_current_match())


@router.get("/api/scoreboard", response_model=list[ScoreboardRowModel])
def get_scoreboard():
    return build_scoreboard(_current_match())


@router.get("/api/debug/round-outcomes", response_model=list[RoundOutcomeModel])
def get_round_outcomes():
    return build_round_outcomes(_current_match())["rounds"]


@router.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_log(file: Annotated[UploadFile, File(...)]):
    """
    Reconstruct an uploaded match log.

    Returns 422 with code NO_MATCH_START when the log has no Match_Start,
    so callers can tell an unusable log from a match with zero rounds.
    """
    store = _get_match_store()
    filename = file.filename or "upload.log"

    if Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: expected one of {', '.join(ALLOWED_EXTENSIONS)}",
        )

    config = store.config
    max_bytes = config.server.max_upload_mb * 1024 * 1024
    content = await file.read()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: maximum is {config.server.max_upload_mb}MB",
        )

    text = content.decode(config.parser.encoding, errors=config.parser.errors)
    # Split on "\n" only, as reading the file from disk does; the parser strips "\r"
    events = parse_lines(text.split("\n"))
    try:
        match = build_match(events, config.match)
    except NoMatchStartFound as e:
        logger.info(f"Rejected upload {filename}: no match start")
        raise no_match_start_error(e) from e

    logger.info(f"Analyzed upload {filename}: {len(match.rounds)} rounds")
    return {
        "filename": filename,
        "summary": build_summary(match),
        "rounds": build_round_outcomes(match),
        "scoreboard": build_scoreboard(match),
    }

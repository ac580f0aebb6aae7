"""
Shared utilities for the LogSight API.

Contains upload limits, the MatchStore that holds the reconstructed match for
the configured log, error translation, and the Pydantic response models used
across route modules.
"""

import logging
import threading
from pathlib import Path

from fastapi import HTTPException
from pydantic import BaseModel, Field

from logsight.analysis.models import MatchModel
from logsight.analysis.reconstruct import NoMatchStartFound, build_match
from logsight.core.config import LogSightConfig, get_config
from logsight.core.parser import parse_log
from logsight.core.utils import StageTimer

logger = logging.getLogger(__name__)

# =============================================================================
# Upload Constants
# =============================================================================

ALLOWED_EXTENSIONS = (".log", ".txt")

NO_MATCH_START_CODE = "NO_MATCH_START"

# =============================================================================
# Match Store
# =============================================================================


class MatchStore:
    """
    Holds the match reconstructed from the configured log file.

    The log is parsed on first access and cached. Failures are not cached, so
    a log that appears or gets fixed later is picked up on the next request.
    """

    def __init__(self, log_path: Path | None = None, config: LogSightConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._match: MatchModel | None = None
        self._log_path = log_path
        self._config = config

    @property
    def config(self) -> LogSightConfig:
        return self._config or get_config()

    @property
    def log_path(self) -> Path:
        return self._log_path or Path(self.config.server.log_path)

    def set_log_path(self, log_path: Path | None) -> None:
        """Point the store at a different log (None: the configured one); drops the cached match."""
        with self._lock:
            self._log_path = log_path
            self._match = None

    def get(self) -> MatchModel:
        """
        Return the cached match, building it on first use.

        Raises:
            FileNotFoundError: If the log file does not exist
            NoMatchStartFound: If the log has no Match_Start
        """
        with self._lock:
            if self._match is None:
                config = self.config
                with StageTimer(f"Reconstructing match from {self.log_path}") as timer:
                    events = parse_log(
                        self.log_path,
                        encoding=config.parser.encoding,
                        errors=config.parser.errors,
                    )
                    self._match = build_match(events, config.match)
                    timer.detail = f"{len(self._match.rounds)} rounds"
            return self._match


def no_match_start_error(exc: NoMatchStartFound) -> HTTPException:
    """422: the log is unusable, as opposed to a valid match with zero rounds."""
    return HTTPException(
        status_code=422,
        detail={"code": NO_MATCH_START_CODE, "message": f"Log unusable: {exc}"},
    )


# =============================================================================
# Pydantic Response Models
# =============================================================================


class HealthResponse(BaseModel):
    status: str
    version: str


class PlayerRowModel(BaseModel):
    name: str
    team_name: str
    kills: int
    deaths: int
    kd: float
    headshots: int = 0


class TeamTableModel(BaseModel):
    team_name: str
    players: list[PlayerRowModel]


class SummaryResponse(BaseModel):
    """Match summary returned by GET /api/summary."""

    map_name: str
    map_winner: str | None = Field(None, description="None on a tie or with no rounds")
    team_a_name: str
    team_b_name: str
    team_a_score: int
    team_b_score: int
    rounds_played: int
    match_length_min: int
    avg_round_length_sec: int
    players: list[PlayerRowModel]
    teams: list[TeamTableModel]


class RoundOutcomeModel(BaseModel):
    round: int
    phase: str
    method: str
    winner_side: str | None = None
    winner_team: str | None = None
    team_a_score_after: int
    team_b_score_after: int


class RoundsResponse(BaseModel):
    rounds: list[RoundOutcomeModel]
    halftime_round: int


class ScoreboardRowModel(BaseModel):
    round: int
    phase: str
    team_a_score: int
    team_b_score: int


class AnalyzeResponse(BaseModel):
    """Everything computed for an uploaded log."""

    filename: str
    summary: SummaryResponse
    rounds: RoundsResponse
    scoreboard: list[ScoreboardRowModel]

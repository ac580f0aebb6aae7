"""
LogSight Analysis - match reconstruction and output projections.

- models: Round, RoundOutcome, PlayerStat, TeamIdentity, MatchModel
- reconstruct: event stream -> MatchModel
- summary: MatchModel -> API/export payloads
"""

from logsight.analysis.models import (
    MatchModel,
    PlayerStat,
    Round,
    RoundOutcome,
    ScoreboardEntry,
    TeamIdentity,
)
from logsight.analysis.reconstruct import NoMatchStartFound, build_match
from logsight.analysis.summary import (
    build_round_outcomes,
    build_scoreboard,
    build_summary,
    half_side_wins,
)

__all__ = [
    "MatchModel",
    "PlayerStat",
    "Round",
    "RoundOutcome",
    "ScoreboardEntry",
    "TeamIdentity",
    "NoMatchStartFound",
    "build_match",
    "build_round_outcomes",
    "build_scoreboard",
    "build_summary",
    "half_side_wins",
]

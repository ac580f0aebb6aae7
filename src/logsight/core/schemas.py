"""
LogSight Data Contracts

Every payload that leaves the core (API responses, exports, CLI) is shaped
here. If a consumer needs a field that doesn't exist here, ADD IT HERE FIRST,
then update the producer in analysis/summary.py.

Producers: analysis/summary.py
Consumers: api/routes_match.py, export.py, cli.py
"""

from __future__ import annotations

from typing import TypedDict

# ============================================================
# SUMMARY
# ============================================================


class PlayerRow(TypedDict):
    """One player's line in a team table."""

    name: str
    team_name: str
    kills: int
    deaths: int
    kd: float  # kills when deaths == 0, else kills/deaths to two decimals
    headshots: int


class TeamTable(TypedDict):
    team_name: str
    players: list[PlayerRow]


class MatchSummary(TypedDict):
    """Top-level match metadata plus player rows."""

    map_name: str
    map_winner: str | None
    team_a_name: str
    team_b_name: str
    team_a_score: int
    team_b_score: int
    rounds_played: int
    match_length_min: int
    avg_round_length_sec: int
    players: list[PlayerRow]
    teams: list[TeamTable]  # team A first, team B second


# ============================================================
# ROUNDS
# ============================================================


class RoundOutcomeRow(TypedDict):
    round: int
    phase: str  # "H1", "H2" or "OT"
    method: str  # "bomb_defused", "bomb_exploded", "last_kill", "unknown"
    winner_side: str | None  # "CT" or "TERRORIST"
    winner_team: str | None
    team_a_score_after: int
    team_b_score_after: int


class RoundsPayload(TypedDict):
    rounds: list[RoundOutcomeRow]
    halftime_round: int


class ScoreboardRow(TypedDict):
    round: int
    phase: str
    team_a_score: int
    team_b_score: int


class SideWins(TypedDict):
    ct: int
    t: int

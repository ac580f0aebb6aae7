"""
Read-only projections of a reconstructed match.

These are the shapes handed to external consumers (HTTP API, exports, CLI):
the match summary with per-team player tables, the per-round outcome list,
and the raw scoreboard progression.
"""

from __future__ import annotations

from logsight.analysis.models import MatchModel, PlayerStat, RoundOutcome
from logsight.core.constants import Phase, Side
from logsight.core.schemas import (
    MatchSummary,
    PlayerRow,
    RoundOutcomeRow,
    RoundsPayload,
    ScoreboardRow,
    SideWins,
    TeamTable,
)
from logsight.core.utils import round_half_up


def player_row(stat: PlayerStat) -> PlayerRow:
    return {
        "name": stat.name,
        "team_name": stat.current_team_name,
        "kills": stat.kills,
        "deaths": stat.deaths,
        "kd": round_half_up(stat.kd_ratio, 2),
        "headshots": stat.headshots,
    }


def group_players_by_team(match: MatchModel) -> list[TeamTable]:
    """
    Player rows grouped by resolved team name.

    Team A and Team B always come first (even when empty); any other name a
    player resolved to follows in order of first appearance. Rows within a
    team are sorted by kills, then fewest deaths.
    """
    order = [match.team_a, match.team_b]
    grouped: dict[str, list[PlayerRow]] = {name: [] for name in order}

    for stat in match.players.values():
        grouped.setdefault(stat.current_team_name, []).append(player_row(stat))

    return [
        {
            "team_name": name,
            "players": sorted(rows, key=lambda r: (-r["kills"], r["deaths"], r["name"])),
        }
        for name, rows in grouped.items()
    ]


def build_summary(match: MatchModel) -> MatchSummary:
    """Match-level summary: map, winner, lengths, score and player tables."""
    score_a, score_b = match.final_score
    return {
        "map_name": match.map_name,
        "map_winner": match.map_winner,
        "team_a_name": match.team_a,
        "team_b_name": match.team_b,
        "team_a_score": score_a,
        "team_b_score": score_b,
        "rounds_played": len(match.rounds),
        "match_length_min": int(round_half_up(match.duration_seconds / 60)),
        "avg_round_length_sec": int(round_half_up(match.average_round_length_seconds)),
        "players": [player_row(stat) for stat in match.players.values()],
        "teams": group_players_by_team(match),
    }


def outcome_row(outcome: RoundOutcome) -> RoundOutcomeRow:
    return {
        "round": outcome.round_number,
        "phase": outcome.phase.value,
        "method": outcome.method.value,
        "winner_side": outcome.winner_side.value if outcome.winner_side else None,
        "winner_team": outcome.winner_team_name,
        "team_a_score_after": outcome.team_a_score_after,
        "team_b_score_after": outcome.team_b_score_after,
    }


def build_round_outcomes(match: MatchModel) -> RoundsPayload:
    return {
        "rounds": [outcome_row(o) for o in match.outcomes],
        "halftime_round": match.halftime_round,
    }


def build_scoreboard(match: MatchModel) -> list[ScoreboardRow]:
    return [
        {
            "round": entry.round_number,
            "phase": entry.phase.value,
            "team_a_score": entry.team_a_score,
            "team_b_score": entry.team_b_score,
        }
        for entry in match.scoreboard
    ]


def half_side_wins(outcomes: list[RoundOutcome], phase: Phase) -> SideWins:
    """Rounds won by each side within one phase. Unknown rounds count for neither."""
    wins: SideWins = {"ct": 0, "t": 0}
    for outcome in outcomes:
        if outcome.phase != phase:
            continue
        if outcome.winner_side == Side.CT:
            wins["ct"] += 1
        elif outcome.winner_side == Side.TERRORIST:
            wins["t"] += 1
    return wins

"""
Data Models for Match Reconstruction

Dataclasses produced by the match reconstructor and read by the summary
projections, the exporter, the CLI and the API. Once build_match() returns,
nothing mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from logsight.core.constants import HALFTIME_ROUND, OutcomeMethod, Phase, Side
from logsight.core.events import KillEvent

# =============================================================================
# Rounds
# =============================================================================


@dataclass
class Round:
    """A single round and everything folded into it."""

    start_time: datetime
    end_time: datetime | None = None
    kills: list[KillEvent] = field(default_factory=list)
    bomb_defused: bool = False
    bomb_exploded: bool = False

    @property
    def last_kill(self) -> KillEvent | None:
        return self.kills[-1] if self.kills else None

    @property
    def resolved_end_time(self) -> datetime:
        """Explicit end, else the last kill, else the round start."""
        if self.end_time is not None:
            return self.end_time
        last_kill = self.last_kill
        return last_kill.timestamp if last_kill else self.start_time

    @property
    def duration_seconds(self) -> float:
        return (self.resolved_end_time - self.start_time).total_seconds()


@dataclass
class RoundOutcome:
    """How a round was decided and the running score after it."""

    round_number: int
    phase: Phase
    method: OutcomeMethod
    winner_side: Side | None
    winner_team_name: str | None
    team_a_score_after: int
    team_b_score_after: int


@dataclass
class ScoreboardEntry:
    """Cumulative score after a round."""

    round_number: int
    phase: Phase
    team_a_score: int
    team_b_score: int


# =============================================================================
# Teams and Players
# =============================================================================


@dataclass
class TeamIdentity:
    """
    Stable Team A / Team B labels.

    Bound once from the team playing declarations. The labels never change;
    only the side each one occupies flips at halftime.
    """

    team_a: str
    team_b: str
    # Latest side -> team name seen in the log ("" when never declared)
    sides: dict[Side, str] = field(default_factory=dict)
    # Distinct team names in order of first sight
    observed_names: list[str] = field(default_factory=list)
    halftime_round: int = HALFTIME_ROUND

    def side_belongs_to_team_a(self, side: Side, round_number: int) -> bool:
        """Team A starts on CT and moves to TERRORIST after halftime."""
        swapped = round_number > self.halftime_round
        return (side == Side.CT) != swapped

    def team_for_side(self, side: Side, round_number: int) -> str:
        """Resolve which team holds a side in a given round."""
        return self.team_a if self.side_belongs_to_team_a(side, round_number) else self.team_b


@dataclass
class PlayerStat:
    """Kill/death totals for one player across the match."""

    name: str
    current_team_name: str
    kills: int = 0
    deaths: int = 0
    headshots: int = 0

    @property
    def kd_ratio(self) -> float:
        """Kills per death; kills alone when the player never died."""
        if self.deaths == 0:
            return float(self.kills)
        return self.kills / self.deaths

    @property
    def headshot_percentage(self) -> float:
        if self.kills == 0:
            return 0.0
        return self.headshots / self.kills * 100


# =============================================================================
# Match
# =============================================================================


@dataclass
class MatchModel:
    """The complete reconstructed match."""

    map_name: str
    start_time: datetime
    end_time: datetime
    teams: TeamIdentity
    rounds: list[Round] = field(default_factory=list)
    outcomes: list[RoundOutcome] = field(default_factory=list)
    scoreboard: list[ScoreboardEntry] = field(default_factory=list)
    players: dict[str, PlayerStat] = field(default_factory=dict)
    map_winner: str | None = None
    average_round_length_seconds: float = 0.0

    @property
    def team_a(self) -> str:
        return self.teams.team_a

    @property
    def team_b(self) -> str:
        return self.teams.team_b

    @property
    def halftime_round(self) -> int:
        return self.teams.halftime_round

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def final_score(self) -> tuple[int, int]:
        """(team A, team B) after the last round; (0, 0) with no rounds."""
        if not self.scoreboard:
            return 0, 0
        final = self.scoreboard[-1]
        return final.team_a_score, final.team_b_score

    @property
    def total_kills(self) -> int:
        return sum(len(r.kills) for r in self.rounds)

"""
Match Reconstruction Engine

Folds the parser's ordered event stream into a match model:
- Anchors the match on the last Match_Start (warmups and restarts come first)
- Binds stable Team A / Team B identities from the team playing declarations
- Partitions events into rounds
- Decides each round (defuse > explosion > last kill > unknown) and keeps
  the running score, flipping the side-to-team mapping at halftime
- Aggregates per-player kills and deaths

The one fatal condition is a log without any Match_Start. Every other
irregularity is absorbed by a fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from logsight.analysis.models import (
    MatchModel,
    PlayerStat,
    Round,
    RoundOutcome,
    ScoreboardEntry,
    TeamIdentity,
)
from logsight.core.config import MatchConfig
from logsight.core.constants import OutcomeMethod, Side, phase_for_round
from logsight.core.events import (
    BombDefusedEvent,
    BombExplodedEvent,
    KillEvent,
    LogEvent,
    MatchStartEvent,
    RoundEndEvent,
    RoundStartEvent,
    TeamPlayingEvent,
)

logger = logging.getLogger(__name__)


class NoMatchStartFound(ValueError):
    """The log contains no Match_Start event, so there is no match to rebuild."""

    def __init__(self, message: str = "No match start found") -> None:
        super().__init__(message)


# ============================================================================
# Anchor, map and teams
# ============================================================================


def find_anchor(events: list[LogEvent]) -> MatchStartEvent:
    """Return the last Match_Start event; earlier ones are warmups or restarts."""
    for event in reversed(events):
        if isinstance(event, MatchStartEvent):
            return event
    raise NoMatchStartFound()


def resolve_map_name(anchor: MatchStartEvent, default: str) -> str:
    return anchor.map_name if anchor.map_name else default


def resolve_team_identity(
    events: Iterable[LogEvent],
    team_a_fallback: str,
    team_b_fallback: str,
) -> TeamIdentity:
    """
    Bind Team A / Team B once for the whole match.

    Team A is whoever was last declared on CT, else the first team name seen,
    else the fallback. Team B is whoever was last declared on TERRORIST if
    that differs from Team A, else the first other name seen, else the fallback.
    """
    sides: dict[Side, str] = {Side.CT: "", Side.TERRORIST: ""}
    observed: list[str] = []

    for event in events:
        if isinstance(event, TeamPlayingEvent):
            sides[event.side] = event.team_name
            if event.team_name not in observed:
                observed.append(event.team_name)

    team_a = sides[Side.CT] or (observed[0] if observed else "") or team_a_fallback

    if sides[Side.TERRORIST] and sides[Side.TERRORIST] != team_a:
        team_b = sides[Side.TERRORIST]
    else:
        team_b = next((name for name in observed if name != team_a), "") or team_b_fallback

    logger.debug(f"Team identity: A={team_a!r} B={team_b!r} (seen: {observed})")
    return TeamIdentity(team_a=team_a, team_b=team_b, sides=sides, observed_names=observed)


# ============================================================================
# Round partitioning
# ============================================================================


@dataclass
class RoundAccumulator:
    """
    Running state of the round partition fold.

    Round_Start opens a new round; kills, round end and bomb outcomes land in
    the currently open round. Anything before the first Round_Start is dropped.
    """

    rounds: list[Round] = field(default_factory=list)
    ignored_events: int = 0

    @property
    def current(self) -> Round | None:
        return self.rounds[-1] if self.rounds else None

    def apply(self, event: LogEvent) -> RoundAccumulator:
        if isinstance(event, RoundStartEvent):
            self.rounds.append(Round(start_time=event.timestamp))
        elif isinstance(event, (MatchStartEvent, TeamPlayingEvent)):
            # Not round content; team declarations are consumed by resolve_team_identity
            pass
        elif isinstance(event, (RoundEndEvent, KillEvent, BombDefusedEvent, BombExplodedEvent)):
            current = self.current
            if current is None:
                self.ignored_events += 1
            else:
                _fold_into_round(current, event)
        else:
            raise TypeError(f"Unhandled event type: {type(event).__name__}")
        return self


def _fold_into_round(
    round_: Round,
    event: RoundEndEvent | KillEvent | BombDefusedEvent | BombExplodedEvent,
) -> None:
    if isinstance(event, RoundEndEvent):
        round_.end_time = event.timestamp
    elif isinstance(event, KillEvent):
        round_.kills.append(event)
    elif isinstance(event, BombDefusedEvent):
        # The flags stay mutually exclusive and a defuse always outranks a detonation
        if round_.bomb_exploded:
            logger.debug(f"Bomb defuse at {event.timestamp} overrides an earlier detonation")
        round_.bomb_defused = True
        round_.bomb_exploded = False
    elif isinstance(event, BombExplodedEvent):
        if round_.bomb_defused:
            logger.debug(f"Ignoring bomb detonation at {event.timestamp}: round already ended by defuse")
        else:
            round_.bomb_exploded = True


def partition_rounds(events: Iterable[LogEvent]) -> list[Round]:
    """Split events into rounds and backfill any missing end times."""
    accumulator = RoundAccumulator()
    for event in events:
        accumulator.apply(event)

    if accumulator.ignored_events:
        logger.debug(f"Ignored {accumulator.ignored_events} events before the first round start")

    for round_ in accumulator.rounds:
        if round_.end_time is None:
            round_.end_time = round_.resolved_end_time

    return accumulator.rounds


def resolve_match_end(events: list[LogEvent], anchor: MatchStartEvent) -> datetime:
    """Last Round_End, else the last event, else the anchor itself."""
    for event in reversed(events):
        if isinstance(event, RoundEndEvent):
            return event.timestamp
    if events:
        return events[-1].timestamp
    return anchor.timestamp


# ============================================================================
# Outcomes and scoring
# ============================================================================


def decide_round(round_: Round) -> tuple[OutcomeMethod, Side | None]:
    """Defuse beats detonation beats last kill; otherwise the outcome is unknown."""
    if round_.bomb_defused:
        return OutcomeMethod.BOMB_DEFUSED, Side.CT
    if round_.bomb_exploded:
        return OutcomeMethod.BOMB_EXPLODED, Side.TERRORIST
    last_kill = round_.last_kill
    if last_kill is not None:
        return OutcomeMethod.LAST_KILL, last_kill.killer.side
    return OutcomeMethod.UNKNOWN, None


def score_rounds(
    rounds: list[Round], teams: TeamIdentity
) -> tuple[list[RoundOutcome], list[ScoreboardEntry]]:
    """Decide every round in order and keep the running score."""
    team_a_score = 0
    team_b_score = 0
    outcomes: list[RoundOutcome] = []
    scoreboard: list[ScoreboardEntry] = []

    for index, round_ in enumerate(rounds):
        round_number = index + 1
        phase = phase_for_round(round_number)
        method, winner_side = decide_round(round_)

        winner_team = None
        if winner_side is not None:
            winner_team = teams.team_for_side(winner_side, round_number)
            if teams.side_belongs_to_team_a(winner_side, round_number):
                team_a_score += 1
            else:
                team_b_score += 1

        outcomes.append(
            RoundOutcome(
                round_number=round_number,
                phase=phase,
                method=method,
                winner_side=winner_side,
                winner_team_name=winner_team,
                team_a_score_after=team_a_score,
                team_b_score_after=team_b_score,
            )
        )
        scoreboard.append(
            ScoreboardEntry(
                round_number=round_number,
                phase=phase,
                team_a_score=team_a_score,
                team_b_score=team_b_score,
            )
        )

    return outcomes, scoreboard


def resolve_map_winner(scoreboard: list[ScoreboardEntry], teams: TeamIdentity) -> str | None:
    """Strictly higher final score wins; ties and empty matches have no winner."""
    if not scoreboard:
        return None
    final = scoreboard[-1]
    if final.team_a_score > final.team_b_score:
        return teams.team_a
    if final.team_b_score > final.team_a_score:
        return teams.team_b
    return None


# ============================================================================
# Player statistics
# ============================================================================


def collect_player_stats(rounds: list[Round], teams: TeamIdentity) -> dict[str, PlayerStat]:
    """
    Count kills and deaths per player name.

    A player's team is re-resolved at every kill they take part in, so it
    always reflects the side they held most recently.
    """
    players: dict[str, PlayerStat] = {}

    for index, round_ in enumerate(rounds):
        round_number = index + 1
        for kill in round_.kills:
            killer_team = teams.team_for_side(kill.killer.side, round_number)
            victim_team = teams.team_for_side(kill.victim.side, round_number)

            killer = players.setdefault(
                kill.killer.name, PlayerStat(name=kill.killer.name, current_team_name=killer_team)
            )
            victim = players.setdefault(
                kill.victim.name, PlayerStat(name=kill.victim.name, current_team_name=victim_team)
            )

            killer.current_team_name = killer_team
            victim.current_team_name = victim_team

            killer.kills += 1
            if kill.headshot:
                killer.headshots += 1
            victim.deaths += 1

    return players


def average_round_length(rounds: list[Round]) -> float:
    """Mean round duration in seconds; 0 with no rounds."""
    if not rounds:
        return 0.0
    return sum(r.duration_seconds for r in rounds) / len(rounds)


# ============================================================================
# Entry point
# ============================================================================


def build_match(events: Iterable[LogEvent], config: MatchConfig | None = None) -> MatchModel:
    """
    Reconstruct the match from parsed events.

    Args:
        events: Events in log order
        config: Fallback names (defaults to MatchConfig())

    Returns:
        The complete, read-only match model

    Raises:
        NoMatchStartFound: If the events contain no Match_Start
    """
    config = config or MatchConfig()
    all_events = list(events)

    anchor = find_anchor(all_events)
    match_events = [e for e in all_events if e.timestamp >= anchor.timestamp]
    logger.info(
        f"Anchored match at {anchor.timestamp.isoformat()} "
        f"({len(all_events) - len(match_events)} earlier events discarded)"
    )

    map_name = resolve_map_name(anchor, config.default_map_name)
    teams = resolve_team_identity(match_events, config.team_a_fallback, config.team_b_fallback)

    rounds = partition_rounds(match_events)
    outcomes, scoreboard = score_rounds(rounds, teams)
    players = collect_player_stats(rounds, teams)

    match = MatchModel(
        map_name=map_name,
        start_time=anchor.timestamp,
        end_time=resolve_match_end(match_events, anchor),
        teams=teams,
        rounds=rounds,
        outcomes=outcomes,
        scoreboard=scoreboard,
        players=players,
        map_winner=resolve_map_winner(scoreboard, teams),
        average_round_length_seconds=average_round_length(rounds),
    )

    score_a, score_b = match.final_score
    logger.info(
        f"Reconstructed {len(rounds)} rounds on {map_name}: "
        f"{teams.team_a} {score_a} - {score_b} {teams.team_b}"
    )
    return match

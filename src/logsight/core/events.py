"""
LogSight Event Types

One immutable dataclass per log phenomenon the parser recognizes. Every event
carries the naive timestamp of the line it came from.

Producers: core/parser.py
Consumers: analysis/reconstruct.py
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from logsight.core.constants import Side


@dataclass(frozen=True)
class PlayerRef:
    """A player as referenced on a single log line."""

    name: str
    side: Side


@dataclass(frozen=True)
class MatchStartEvent:
    timestamp: datetime
    map_name: str | None = None  # None when the line has no `on "<map>"` clause


@dataclass(frozen=True)
class RoundStartEvent:
    timestamp: datetime


@dataclass(frozen=True)
class RoundEndEvent:
    timestamp: datetime


@dataclass(frozen=True)
class KillEvent:
    """A kill line. Weapon and headshot are informational only."""

    timestamp: datetime
    killer: PlayerRef
    victim: PlayerRef
    weapon: str = ""
    headshot: bool = False


@dataclass(frozen=True)
class TeamPlayingEvent:
    """Which team currently occupies a side."""

    timestamp: datetime
    side: Side
    team_name: str


@dataclass(frozen=True)
class BombDefusedEvent:
    timestamp: datetime


@dataclass(frozen=True)
class BombExplodedEvent:
    timestamp: datetime


LogEvent = (
    MatchStartEvent
    | RoundStartEvent
    | RoundEndEvent
    | KillEvent
    | TeamPlayingEvent
    | BombDefusedEvent
    | BombExplodedEvent
)

"""
LogSight Core - Foundation modules for log parsing.

This module contains the fundamental components:
- constants: Sides, phases, outcome methods and log marker phrases
- config: Application configuration management
- utils: General utility functions
- events: Typed events produced by the parser
- parser: Match log parsing
- schemas: Data contracts for module boundaries
"""

from logsight.core.constants import (
    DEFAULT_MAP_NAME,
    HALFTIME_ROUND,
    REGULATION_ROUNDS,
    TEAM_A_FALLBACK,
    TEAM_B_FALLBACK,
    OutcomeMethod,
    Phase,
    Side,
    phase_for_round,
)
from logsight.core.events import (
    BombDefusedEvent,
    BombExplodedEvent,
    KillEvent,
    LogEvent,
    MatchStartEvent,
    PlayerRef,
    RoundEndEvent,
    RoundStartEvent,
    TeamPlayingEvent,
)
from logsight.core.parser import parse_line, parse_lines, parse_log

__all__ = [
    # Enums
    "OutcomeMethod",
    "Phase",
    "Side",
    # Constants
    "DEFAULT_MAP_NAME",
    "HALFTIME_ROUND",
    "REGULATION_ROUNDS",
    "TEAM_A_FALLBACK",
    "TEAM_B_FALLBACK",
    "phase_for_round",
    # Events
    "BombDefusedEvent",
    "BombExplodedEvent",
    "KillEvent",
    "LogEvent",
    "MatchStartEvent",
    "PlayerRef",
    "RoundEndEvent",
    "RoundStartEvent",
    "TeamPlayingEvent",
    # Parser
    "parse_line",
    "parse_lines",
    "parse_log",
]

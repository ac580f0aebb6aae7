"""
LogSight - Constants

Defines sides, match phases, outcome methods and the literal phrases the
log parser keys on. Based on the CS:GO/CS2 dedicated server log format.
"""

from enum import StrEnum


class Side(StrEnum):
    """The two team slots within a round."""

    CT = "CT"
    TERRORIST = "TERRORIST"


class Phase(StrEnum):
    """
    Match phase, a pure function of the round number.

    MR15: rounds 1-15 first half, 16-30 second half, anything past 30 is overtime.
    """

    FIRST_HALF = "H1"
    SECOND_HALF = "H2"
    OVERTIME = "OT"


class OutcomeMethod(StrEnum):
    """How a round was decided."""

    BOMB_DEFUSED = "bomb_defused"
    BOMB_EXPLODED = "bomb_exploded"
    LAST_KILL = "last_kill"
    UNKNOWN = "unknown"


# Standard MR15 halftime
HALFTIME_ROUND = 15
REGULATION_ROUNDS = 30

# Fallbacks when the log does not name them
DEFAULT_MAP_NAME = "Nuke"
TEAM_A_FALLBACK = "Team A"
TEAM_B_FALLBACK = "Team B"

# Marker phrases (exact substrings)
MATCH_START_MARKER = 'World triggered "Match_Start"'
ROUND_START_MARKER = 'World triggered "Round_Start"'
ROUND_END_MARKER = 'World triggered "Round_End"'
TEAM_PLAYING_PREFIX = 'Team playing "'
# Different log producers emit one or the other
BOMB_DEFUSED_MARKERS = ("SFUI_Notice_Bomb_Defused", 'triggered "Defused_The_Bomb"')
BOMB_EXPLODED_MARKER = "SFUI_Notice_Target_Bombed"
KILL_TOKEN = " killed "
HEADSHOT_QUALIFIER = "(headshot)"


def phase_for_round(round_number: int) -> Phase:
    """Determine which phase a round belongs to."""
    if round_number <= HALFTIME_ROUND:
        return Phase.FIRST_HALF
    if round_number <= REGULATION_ROUNDS:
        return Phase.SECOND_HALF
    return Phase.OVERTIME

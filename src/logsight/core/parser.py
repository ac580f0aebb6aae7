"""
Log Parser for CS Dedicated Server Match Logs

Turns raw log lines into an ordered sequence of typed events:
- Match start (with optional map name)
- Round start / round end
- Team playing declarations (which team holds CT / TERRORIST)
- Bomb defused / bomb exploded
- Kills (killer, victim, weapon, headshot)

The parser knows nothing about rounds, teams or scoring. Anything it does not
recognize is dropped silently; a malformed log degrades by omission and never
raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path

from logsight.core.constants import (
    BOMB_DEFUSED_MARKERS,
    BOMB_EXPLODED_MARKER,
    HEADSHOT_QUALIFIER,
    KILL_TOKEN,
    MATCH_START_MARKER,
    ROUND_END_MARKER,
    ROUND_START_MARKER,
    TEAM_PLAYING_PREFIX,
    Side,
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

logger = logging.getLogger(__name__)

# MM/DD/YYYY - HH:MM:SS: <message>
LINE_PATTERN = re.compile(
    r"^(?P<date>\d{2}/\d{2}/\d{4}) - (?P<time>\d{2}:\d{2}:\d{2}): (?P<message>.*)$"
)

# "name<userid><steamid><SIDE>"
PLAYER_PATTERN = re.compile(
    r'^"(?P<name>[^"<]+)<(?P<userid>\d+)><(?P<steam>[^>]+)><(?P<side>CT|TERRORIST)>"'
)

MAP_PATTERN = re.compile(r'on "(?P<map>[^"]+)"')

TEAM_PLAYING_PATTERN = re.compile(r'^Team playing "(?P<side>CT|TERRORIST)": (?P<team>.+)$')

# Quoted fields never contain '"', so names with embedded quotes fail here and the line drops
KILL_PATTERN = re.compile(
    r'^(?P<killer>"[^"]+").*' + KILL_TOKEN + r'(?P<victim>"[^"]+").* with "(?P<weapon>[^"]+)"'
)


def parse_timestamp_line(line: str) -> tuple[datetime, str] | None:
    """
    Split a log line into its timestamp and message body.

    Args:
        line: Raw log line (trailing newline allowed)

    Returns:
        (timestamp, message) or None if the line does not match the outer grammar
        or carries an impossible date.
    """
    match = LINE_PATTERN.match(line.rstrip("\r\n"))
    if not match:
        return None

    month, day, year = (int(part) for part in match.group("date").split("/"))
    hour, minute, second = (int(part) for part in match.group("time").split(":"))
    try:
        timestamp = datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None

    return timestamp, match.group("message")


def parse_player_token(token: str) -> PlayerRef | None:
    """
    Extract player name and side from a quoted player token.

    Returns None when the token is malformed, the side is not CT/TERRORIST,
    or the name is blank after trimming.
    """
    match = PLAYER_PATTERN.match(token)
    if not match:
        return None

    name = match.group("name").strip()
    if not name:
        return None

    return PlayerRef(name=name, side=Side(match.group("side")))


def _parse_kill(timestamp: datetime, message: str) -> KillEvent | None:
    match = KILL_PATTERN.match(message)
    if not match:
        return None

    killer = parse_player_token(match.group("killer"))
    victim = parse_player_token(match.group("victim"))
    if killer is None or victim is None:
        return None

    return KillEvent(
        timestamp=timestamp,
        killer=killer,
        victim=victim,
        weapon=match.group("weapon"),
        headshot=HEADSHOT_QUALIFIER in message,
    )


def parse_line(line: str) -> LogEvent | None:
    """
    Classify a single log line.

    Message checks run in a fixed priority order and the first match wins.
    A line that hits a marker but fails its detailed extraction is dropped
    rather than tried against the remaining markers.
    """
    parsed = parse_timestamp_line(line)
    if parsed is None:
        return None
    timestamp, message = parsed

    if MATCH_START_MARKER in message:
        map_match = MAP_PATTERN.search(message)
        return MatchStartEvent(timestamp=timestamp, map_name=map_match.group("map") if map_match else None)

    if ROUND_START_MARKER in message:
        return RoundStartEvent(timestamp=timestamp)

    if ROUND_END_MARKER in message:
        return RoundEndEvent(timestamp=timestamp)

    if message.startswith(TEAM_PLAYING_PREFIX):
        team_match = TEAM_PLAYING_PATTERN.match(message)
        if not team_match:
            return None
        return TeamPlayingEvent(
            timestamp=timestamp,
            side=Side(team_match.group("side")),
            team_name=team_match.group("team"),
        )

    if any(marker in message for marker in BOMB_DEFUSED_MARKERS):
        return BombDefusedEvent(timestamp=timestamp)

    if BOMB_EXPLODED_MARKER in message:
        return BombExplodedEvent(timestamp=timestamp)

    if KILL_TOKEN in message:
        return _parse_kill(timestamp, message)

    return None


def iter_events(lines: Iterable[str]) -> Iterator[LogEvent]:
    """Lazily parse lines into events, preserving input order."""
    total = 0
    dropped = 0
    for line in lines:
        total += 1
        event = parse_line(line)
        if event is None:
            dropped += 1
            continue
        yield event
    logger.debug(f"Parsed {total - dropped} events from {total} lines ({dropped} dropped)")


def parse_lines(lines: Iterable[str]) -> list[LogEvent]:
    """Parse lines eagerly into a list of events."""
    return list(iter_events(lines))


def read_log_lines(path: Path | str, encoding: str = "utf-8", errors: str = "replace") -> Iterator[str]:
    """
    Read a log file one line at a time.

    The whole file is never held in memory. Undecodable bytes are replaced
    by default so a stray byte cannot abort the read.
    """
    with open(path, encoding=encoding, errors=errors) as f:
        for line in f:
            yield line


def parse_log(path: Path | str, encoding: str = "utf-8", errors: str = "replace") -> list[LogEvent]:
    """
    Read and parse a match log file.

    Args:
        path: Path to the log file
        encoding: Text encoding of the file
        errors: Codec error handling passed to open()

    Returns:
        Events in log line order

    Raises:
        OSError: If the file cannot be opened
    """
    events = parse_lines(read_log_lines(path, encoding=encoding, errors=errors))
    logger.info(f"Parsed {len(events)} events from {path}")
    return events

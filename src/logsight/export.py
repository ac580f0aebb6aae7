"""
Export Functionality for LogSight

Provides export formats for reconstructed matches:
- JSON (default): summary, round outcomes and scoreboard in one document
- CSV: player table or round table, one row per player / round
"""

import csv
import json
import logging
from datetime import datetime
from io import StringIO
from pathlib import Path
from typing import Any

from logsight import __version__
from logsight.analysis.models import MatchModel
from logsight.analysis.summary import build_round_outcomes, build_scoreboard, build_summary
from logsight.core.schemas import PlayerRow, RoundOutcomeRow

logger = logging.getLogger(__name__)

PLAYER_CSV_FIELDS = ["name", "team_name", "kills", "deaths", "kd", "headshots"]
ROUND_CSV_FIELDS = [
    "round",
    "phase",
    "method",
    "winner_side",
    "winner_team",
    "team_a_score_after",
    "team_b_score_after",
]


def match_to_dict(match: MatchModel) -> dict[str, Any]:
    """Everything a consumer needs about a match as plain JSON-ready data."""
    return {
        "summary": build_summary(match),
        "rounds": build_round_outcomes(match),
        "scoreboard": build_scoreboard(match),
    }


# ============================================================================
# JSON Export
# ============================================================================


def export_to_json(
    data: dict[str, Any],
    output_path: Path | None = None,
    indent: int = 2,
    include_metadata: bool = True,
) -> str:
    """
    Export match data to JSON format.

    Args:
        data: Match data dictionary
        output_path: Optional path to write the file
        indent: JSON indentation level
        include_metadata: Whether to include export metadata

    Returns:
        JSON string
    """
    export_data = dict(data)

    if include_metadata:
        export_data = {
            "_metadata": {
                "exported_at": datetime.now().isoformat(),
                "format": "logsight_json",
                "version": __version__,
            },
            **export_data,
        }

    json_str = json.dumps(export_data, indent=indent, default=str)

    if output_path:
        output_path.write_text(json_str, encoding="utf-8")
        logger.info(f"Exported JSON to {output_path}")

    return json_str


# ============================================================================
# CSV Export
# ============================================================================


def _rows_to_csv(rows: list[dict[str, Any]], fieldnames: list[str], delimiter: str) -> str:
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=fieldnames, delimiter=delimiter, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return output.getvalue()


def export_players_csv(
    players: list[PlayerRow],
    output_path: Path | None = None,
    delimiter: str = ",",
) -> str:
    """Export player rows to CSV."""
    csv_str = _rows_to_csv(list(players), PLAYER_CSV_FIELDS, delimiter)
    if output_path:
        output_path.write_text(csv_str, encoding="utf-8", newline="")
        logger.info(f"Exported {len(players)} players to {output_path}")
    return csv_str


def export_rounds_csv(
    rounds: list[RoundOutcomeRow],
    output_path: Path | None = None,
    delimiter: str = ",",
) -> str:
    """Export round outcome rows to CSV."""
    csv_str = _rows_to_csv(list(rounds), ROUND_CSV_FIELDS, delimiter)
    if output_path:
        output_path.write_text(csv_str, encoding="utf-8", newline="")
        logger.info(f"Exported {len(rounds)} rounds to {output_path}")
    return csv_str


# ============================================================================
# Main Export Function
# ============================================================================


def export_match(
    match: MatchModel,
    output_path: Path,
    indent: int = 2,
    delimiter: str = ",",
    default_format: str = "json",
) -> Path:
    """
    Export a match, detecting the format from the file extension.

    `.json` writes the full document. `.csv` writes the player table to the
    given path and the round table next to it as `<stem>_rounds.csv`. A path
    without an extension gets `default_format` appended.

    Returns:
        The path actually written (the player table for CSV)

    Raises:
        ValueError: If the extension is not supported
    """
    if not output_path.suffix:
        output_path = output_path.with_suffix(f".{default_format.lower().lstrip('.')}")
    suffix = output_path.suffix.lower()

    if suffix == ".json":
        export_to_json(match_to_dict(match), output_path, indent=indent)
    elif suffix == ".csv":
        export_players_csv(build_summary(match)["players"], output_path, delimiter=delimiter)
        rounds_path = output_path.with_name(f"{output_path.stem}_rounds.csv")
        export_rounds_csv(build_round_outcomes(match)["rounds"], rounds_path, delimiter=delimiter)
    else:
        raise ValueError(f"Unsupported export format: {suffix} (use .json or .csv)")

    return output_path

"""
LogSight CLI - Command Line Interface for CS Match Logs

Provides commands for:
- Analyzing a match log (summary, team tables, export)
- Listing round-by-round outcomes
- Generating a default configuration file
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from logsight import __version__
from logsight.analysis.models import MatchModel
from logsight.analysis.reconstruct import NoMatchStartFound, build_match
from logsight.analysis.summary import build_round_outcomes, build_summary, half_side_wins
from logsight.core.config import generate_default_config, get_config, load_config, set_config
from logsight.core.constants import Phase
from logsight.core.parser import parse_log
from logsight.core.utils import StageTimer, format_clock
from logsight.export import export_match

app = typer.Typer(
    name="logsight",
    help="Rebuild rounds, scores and player stats from a CS match log",
    add_completion=False,
)
console = Console()

logger = logging.getLogger(__name__)

# Exit code for a log without any Match_Start
EXIT_NO_MATCH_START = 2


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]LogSight[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a config file (.yaml, .toml, .json)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """LogSight - CS Match Log Analyzer"""
    if config_file is not None:
        set_config(load_config(config_file))
    config = get_config()

    logging.basicConfig(level=config.logging.level.upper(), format=config.logging.format)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _load_match(log_path: Path) -> MatchModel:
    """Parse and reconstruct, exiting cleanly when the log is unusable."""
    config = get_config()
    try:
        with StageTimer(f"Analyzing {log_path.name}", level=logging.DEBUG) as timer:
            events = parse_log(log_path, encoding=config.parser.encoding, errors=config.parser.errors)
            match = build_match(events, config.match)
            timer.detail = f"{len(events)} events, {len(match.rounds)} rounds"
        return match
    except NoMatchStartFound:
        console.print(f"[red]Log unusable:[/red] no Match_Start event found in {log_path}")
        raise typer.Exit(EXIT_NO_MATCH_START)


@app.command()
def analyze(
    log_path: Path = typer.Argument(
        ...,
        help="Path to the match log file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Export results (format detected from extension: .json, .csv)",
    ),
) -> None:
    """
    Analyze a match log and display the summary.

    Shows map, winner, final score, match and round lengths, and one
    kill/death table per team.
    """
    match = _load_match(log_path)
    summary = build_summary(match)

    info_table = Table(title="Match Information", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")
    info_table.add_row("Map", summary["map_name"])
    info_table.add_row(
        "Score",
        f"{summary['team_a_name']} {summary['team_a_score']} - "
        f"{summary['team_b_score']} {summary['team_b_name']}",
    )
    info_table.add_row("Winner", summary["map_winner"] or "None (tie or no rounds)")
    info_table.add_row("Rounds", str(summary["rounds_played"]))
    info_table.add_row("Match Length", format_clock(match.duration_seconds))
    info_table.add_row("Avg Round Length", format_clock(match.average_round_length_seconds))
    console.print(info_table)
    console.print()

    for team in summary["teams"]:
        table = Table(title=team["team_name"])
        table.add_column("Player", style="cyan")
        table.add_column("K", justify="right")
        table.add_column("D", justify="right")
        table.add_column("K/D", justify="right")
        table.add_column("HS", justify="right")
        for row in team["players"]:
            table.add_row(
                row["name"],
                str(row["kills"]),
                str(row["deaths"]),
                f"{row['kd']:.2f}",
                str(row["headshots"]),
            )
        console.print(table)
        console.print()

    if output:
        export_config = get_config().export
        try:
            written = export_match(
                match,
                output,
                indent=export_config.json_indent,
                delimiter=export_config.csv_delimiter,
                default_format=export_config.default_format,
            )
        except ValueError as e:
            console.print(f"[red]Export failed:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]Results exported to:[/green] {written}")


@app.command()
def rounds(
    log_path: Path = typer.Argument(
        ...,
        help="Path to the match log file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """Show how every round was decided and the running score."""
    match = _load_match(log_path)
    payload = build_round_outcomes(match)

    if not payload["rounds"]:
        console.print("[yellow]No rounds found after the match start[/yellow]")
        return

    table = Table(title=f"Rounds - {match.team_a} vs {match.team_b}")
    table.add_column("#", justify="right")
    table.add_column("Phase")
    table.add_column("Method")
    table.add_column("Side")
    table.add_column("Winner", style="cyan")
    table.add_column("Score", justify="right")

    for row in payload["rounds"]:
        table.add_row(
            str(row["round"]),
            row["phase"],
            row["method"],
            row["winner_side"] or "-",
            row["winner_team"] or "-",
            f"{row['team_a_score_after']}-{row['team_b_score_after']}",
        )
        if row["round"] == payload["halftime_round"]:
            table.add_section()

    console.print(table)

    for phase in (Phase.FIRST_HALF, Phase.SECOND_HALF):
        wins = half_side_wins(match.outcomes, phase)
        console.print(f"{phase.value}: CT {wins['ct']} - {wins['t']} T")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("logsight.yaml"), help="Where to write the config file"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        generate_default_config(path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Wrote default config to:[/green] {path}")


if __name__ == "__main__":
    app()

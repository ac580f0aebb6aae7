"""
LogSight - CS Match Log Analyzer

Rebuilds a structured match history (rounds, scores, team identities, round
outcomes and per-player kill/death stats) from a dedicated server match log.

Usage:
    from logsight import parse_log, build_match

    match = build_match(parse_log("match.log"))

    for outcome in match.outcomes:
        print(outcome.round_number, outcome.method, outcome.winner_team_name)
"""

__version__ = "0.1.0"
__author__ = "LogSight Contributors"


def __getattr__(name):
    """Lazy import so `import logsight` stays cheap."""
    if name == "parse_log":
        from logsight.core.parser import parse_log
        return parse_log
    elif name == "parse_lines":
        from logsight.core.parser import parse_lines
        return parse_lines
    elif name == "build_match":
        from logsight.analysis.reconstruct import build_match
        return build_match
    elif name == "NoMatchStartFound":
        from logsight.analysis.reconstruct import NoMatchStartFound
        return NoMatchStartFound
    elif name == "MatchModel":
        from logsight.analysis.models import MatchModel
        return MatchModel
    elif name == "build_summary":
        from logsight.analysis.summary import build_summary
        return build_summary
    raise AttributeError(f"module 'logsight' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Parsing
    "parse_log",
    "parse_lines",
    # Reconstruction
    "build_match",
    "NoMatchStartFound",
    "MatchModel",
    # Projections
    "build_summary",
]

"""
Small helpers shared by the CLI, the API and the summary projections.

- round_half_up: rounding that matches the web UI (halves go up, not to even)
- format_clock: match and round lengths as m:ss
- StageTimer: logs how long a pipeline stage (parse, reconstruct) took
"""

import logging
import math
import time

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round to ndigits decimals with halves rounded toward +infinity.

    Python's round() sends 48.5 to 48; displayed lengths and K/D ratios
    expect 49.
    """
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def format_clock(seconds: float) -> str:
    """Format a non-negative duration as minutes:seconds, e.g. 275 -> "4:35"."""
    total = int(round_half_up(max(seconds, 0.0)))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


class StageTimer:
    """
    Context manager that times one stage of the pipeline.

    Callers may set `detail` inside the block to append a result count to
    the log line, e.g. "parsed 1204 events".

    Usage:
        with StageTimer("reconstruct match.log") as timer:
            match = build_match(events)
            timer.detail = f"{len(match.rounds)} rounds"
    """

    def __init__(self, stage: str, level: int = logging.INFO):
        self.stage = stage
        self.level = level
        self.detail = ""
        self.elapsed = 0.0
        self._started = 0.0

    def __enter__(self) -> "StageTimer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed = time.perf_counter() - self._started
        if exc_type is not None:
            # Expected domain failures (missing file, no match start) are reported by the caller
            logger.debug(f"{self.stage} stopped after {self.elapsed:.3f}s: {exc_type.__name__}")
        else:
            suffix = f" ({self.detail})" if self.detail else ""
            logger.log(self.level, f"{self.stage} took {self.elapsed:.3f}s{suffix}")
        return False

"""Shared fixtures for the LogSight test suite."""

from pathlib import Path

import pytest

from logfactory import NO_MATCH_START_LINES, SAMPLE_LOG_LINES
from logsight.analysis.models import MatchModel
from logsight.analysis.reconstruct import build_match
from logsight.core.config import LogSightConfig, reset_config, set_config
from logsight.core.parser import parse_lines


@pytest.fixture(autouse=True)
def default_config():
    """Every test sees default settings, whatever config files exist on the machine."""
    set_config(LogSightConfig())
    yield
    reset_config()


@pytest.fixture
def sample_log_path(tmp_path) -> Path:
    path = tmp_path / "match.log"
    path.write_text("\n".join(SAMPLE_LOG_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def no_match_start_log_path(tmp_path) -> Path:
    path = tmp_path / "broken.log"
    path.write_text("\n".join(NO_MATCH_START_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_match() -> MatchModel:
    return build_match(parse_lines(SAMPLE_LOG_LINES))

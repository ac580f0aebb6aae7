"""Tests for the FastAPI web API."""

import io

import pytest
from fastapi.testclient import TestClient

from logfactory import NO_MATCH_START_LINES, SAMPLE_LOG_LINES, kill_message, log_line
from logsight import __version__
from logsight.api import app, match_store
from logsight.core.config import load_config, set_config

client = TestClient(app)


@pytest.fixture
def served_log(sample_log_path):
    """Point the API at the sample log for the duration of a test."""
    match_store.set_log_path(sample_log_path)
    yield sample_log_path
    match_store.set_log_path(None)


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestSummaryEndpoint:
    """Tests for GET /api/summary."""

    def test_summary(self, served_log):
        response = client.get("/api/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["map_name"] == "de_nuke"
        assert data["map_winner"] == "Natus Vincere"
        assert data["match_length_min"] == 5
        assert data["avg_round_length_sec"] == 49
        assert len(data["players"]) == 4
        assert [t["team_name"] for t in data["teams"]] == ["Natus Vincere", "Vitality"]

    def test_match_is_cached(self, served_log):
        """The log is read once; later changes on disk do not affect a cached match."""
        client.get("/api/summary")
        served_log.write_text("", encoding="utf-8")
        response = client.get("/api/summary")
        assert response.status_code == 200
        assert response.json()["map_name"] == "de_nuke"

    def test_missing_log_returns_404(self, tmp_path):
        match_store.set_log_path(tmp_path / "missing.log")
        try:
            response = client.get("/api/summary")
        finally:
            match_store.set_log_path(None)
        assert response.status_code == 404

    def test_log_without_match_start_returns_422(self, no_match_start_log_path):
        match_store.set_log_path(no_match_start_log_path)
        try:
            response = client.get("/api/summary")
        finally:
            match_store.set_log_path(None)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "NO_MATCH_START"


class TestRoundEndpoints:
    """Tests for the per-round endpoints."""

    def test_rounds(self, served_log):
        response = client.get("/api/rounds")
        assert response.status_code == 200
        data = response.json()
        assert data["halftime_round"] == 15
        assert [r["method"] for r in data["rounds"]] == [
            "last_kill",
            "bomb_exploded",
            "bomb_defused",
            "unknown",
        ]

    def test_scoreboard(self, served_log):
        response = client.get("/api/scoreboard")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 4
        assert data[-1] == {"round": 4, "phase": "H1", "team_a_score": 2, "team_b_score": 1}

    def test_debug_round_outcomes(self, served_log):
        response = client.get("/api/debug/round-outcomes")
        assert response.status_code == 200
        data = response.json()
        assert data[0]["winner_team"] == "Natus Vincere"
        assert data[3]["winner_side"] is None


class TestAnalyzeEndpoint:
    """Tests for POST /api/analyze."""

    def _upload(self, lines, filename="match.log"):
        content = "\n".join(lines).encode("utf-8")
        return client.post("/api/analyze", files={"file": (filename, io.BytesIO(content), "text/plain")})

    def test_analyze_sample(self):
        response = self._upload(SAMPLE_LOG_LINES)
        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "match.log"
        assert data["summary"]["map_winner"] == "Natus Vincere"
        assert len(data["rounds"]["rounds"]) == 4
        assert len(data["scoreboard"]) == 4

    def test_analyze_empty_match_is_not_an_error(self):
        """A match with zero rounds is valid and distinct from an unusable log."""
        response = self._upload([log_line("19:01:00", 'World triggered "Match_Start"')])
        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["rounds_played"] == 0
        assert data["summary"]["map_name"] == "Nuke"
        assert data["summary"]["map_winner"] is None

    def test_analyze_without_match_start(self):
        response = self._upload(NO_MATCH_START_LINES)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "NO_MATCH_START"

    def test_analyze_rejects_other_extensions(self):
        response = self._upload(SAMPLE_LOG_LINES, filename="match.dem")
        assert response.status_code == 400

    def test_analyze_rejects_oversized_upload(self):
        config = match_store.config
        original = config.server.max_upload_mb
        config.server.max_upload_mb = 0
        try:
            response = self._upload(SAMPLE_LOG_LINES)
        finally:
            config.server.max_upload_mb = original
        assert response.status_code == 413

    def test_analyze_missing_file(self):
        response = client.post("/api/analyze")
        assert response.status_code == 422

    def test_analyze_splits_only_on_newlines(self):
        """Unicode line separators inside a line do not break it, matching a read from disk."""
        response = self._upload([log_line("19:01:00", 'World triggered "Match_Start" on "de\x1cnuke\u2028"')])
        assert response.status_code == 200
        assert response.json()["summary"]["map_name"] == "de\x1cnuke\u2028"

    def test_analyze_numeric_fallback_team_name(self, monkeypatch):
        """A fallback team name made of digits stays a string end to end."""
        monkeypatch.setenv("LOGSIGHT_TEAM_A_FALLBACK", "9")
        set_config(load_config(include_env=True))
        response = self._upload(
            [
                log_line("19:01:00", 'World triggered "Match_Start" on "de_nuke"'),
                log_line("19:02:00", 'World triggered "Round_Start"'),
                log_line("19:02:30", kill_message("a", "CT", "b", "TERRORIST")),
            ]
        )
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary["team_a_name"] == "9"
        assert summary["map_winner"] == "9"

"""Tests for JSON and CSV export."""

import csv
import json

import pytest

from logsight.export import (
    export_match,
    export_players_csv,
    export_to_json,
    match_to_dict,
)


class TestJsonExport:
    def test_metadata(self, sample_match):
        data = json.loads(export_to_json(match_to_dict(sample_match)))
        assert data["_metadata"]["format"] == "logsight_json"
        assert data["summary"]["map_name"] == "de_nuke"

    def test_without_metadata(self, sample_match):
        data = json.loads(export_to_json(match_to_dict(sample_match), include_metadata=False))
        assert set(data) == {"summary", "rounds", "scoreboard"}

    def test_export_match_json(self, sample_match, tmp_path):
        path = export_match(sample_match, tmp_path / "match.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["rounds"]["rounds"][1]["method"] == "bomb_exploded"
        assert data["scoreboard"][-1]["team_a_score"] == 2


class TestCsvExport:
    def test_players_csv_string(self, sample_match):
        text = export_players_csv(match_to_dict(sample_match)["summary"]["players"])
        assert text.splitlines()[0] == "name,team_name,kills,deaths,kd,headshots"

    def test_export_match_csv_writes_two_files(self, sample_match, tmp_path):
        export_match(sample_match, tmp_path / "match.csv", delimiter=";")

        with open(tmp_path / "match.csv", newline="", encoding="utf-8") as f:
            players = list(csv.DictReader(f, delimiter=";"))
        with open(tmp_path / "match_rounds.csv", newline="", encoding="utf-8") as f:
            rounds = list(csv.DictReader(f, delimiter=";"))

        assert {row["name"] for row in players} == {"s1mple", "ZywOo", "apEX", "b1t"}
        assert len(rounds) == 4
        assert rounds[3]["method"] == "unknown"
        assert rounds[3]["winner_side"] == ""


def test_unsupported_format(sample_match, tmp_path):
    with pytest.raises(ValueError, match="Unsupported export format"):
        export_match(sample_match, tmp_path / "match.xlsx")


class TestDefaultFormat:
    """A path without an extension takes the configured default format."""

    def test_json_by_default(self, sample_match, tmp_path):
        path = export_match(sample_match, tmp_path / "match")
        assert path == tmp_path / "match.json"
        assert json.loads(path.read_text(encoding="utf-8"))["summary"]["map_name"] == "de_nuke"

    def test_csv_default(self, sample_match, tmp_path):
        path = export_match(sample_match, tmp_path / "match", default_format="csv")
        assert path == tmp_path / "match.csv"
        assert (tmp_path / "match_rounds.csv").exists()

    def test_explicit_extension_wins(self, sample_match, tmp_path):
        path = export_match(sample_match, tmp_path / "match.json", default_format="csv")
        assert path == tmp_path / "match.json"

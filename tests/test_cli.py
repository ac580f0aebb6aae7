"""Tests for the typer command line interface."""

import json

from typer.testing import CliRunner

from logsight import __version__
from logsight.cli import EXIT_NO_MATCH_START, app

runner = CliRunner()


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestAnalyzeCommand:
    """Tests for `logsight analyze`."""

    def test_analyze_sample(self, sample_log_path):
        result = runner.invoke(app, ["analyze", str(sample_log_path)])
        assert result.exit_code == 0, result.output
        assert "de_nuke" in result.output
        assert "Natus Vincere" in result.output
        assert "Vitality" in result.output
        assert "s1mple" in result.output
        assert "4:35" in result.output

    def test_analyze_without_match_start(self, no_match_start_log_path):
        result = runner.invoke(app, ["analyze", str(no_match_start_log_path)])
        assert result.exit_code == EXIT_NO_MATCH_START
        assert "Log unusable" in result.output

    def test_analyze_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.log")])
        assert result.exit_code != 0

    def test_export_json(self, sample_log_path, tmp_path):
        output = tmp_path / "result.json"
        result = runner.invoke(app, ["analyze", str(sample_log_path), "--output", str(output)])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["summary"]["map_winner"] == "Natus Vincere"
        assert len(data["scoreboard"]) == 4

    def test_export_unsupported_format(self, sample_log_path, tmp_path):
        result = runner.invoke(app, ["analyze", str(sample_log_path), "-o", str(tmp_path / "result.xlsx")])
        assert result.exit_code == 1
        assert "Export failed" in result.output


class TestRoundsCommand:
    """Tests for `logsight rounds`."""

    def test_rounds(self, sample_log_path):
        result = runner.invoke(app, ["rounds", str(sample_log_path)])
        assert result.exit_code == 0, result.output
        assert "bomb_exploded" in result.output
        assert "bomb_defused" in result.output
        assert "H1: CT 2 - 1 T" in result.output

    def test_rounds_without_match_start(self, no_match_start_log_path):
        result = runner.invoke(app, ["rounds", str(no_match_start_log_path)])
        assert result.exit_code == EXIT_NO_MATCH_START


class TestInitConfigCommand:
    """Tests for `logsight init-config`."""

    def test_writes_yaml(self, tmp_path):
        path = tmp_path / "logsight.yaml"
        result = runner.invoke(app, ["init-config", str(path)])
        assert result.exit_code == 0, result.output
        assert "default_map_name: Nuke" in path.read_text()

    def test_refuses_to_overwrite(self, tmp_path):
        path = tmp_path / "logsight.yaml"
        path.write_text("keep me")
        result = runner.invoke(app, ["init-config", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == "keep me"

    def test_force_overwrites(self, tmp_path):
        path = tmp_path / "logsight.json"
        path.write_text("{}")
        result = runner.invoke(app, ["init-config", str(path), "--force"])
        assert result.exit_code == 0, result.output
        assert json.loads(path.read_text())["match"]["default_map_name"] == "Nuke"

    def test_config_option_applies(self, tmp_path, sample_log_path):
        config_path = tmp_path / "custom.json"
        config_path.write_text(json.dumps({"match": {"team_a_fallback": "Blue"}}))
        result = runner.invoke(app, ["--config", str(config_path), "rounds", str(sample_log_path)])
        assert result.exit_code == 0, result.output


class TestExportDefaultFormat:
    def test_configured_format_applies_without_extension(self, sample_log_path, tmp_path, monkeypatch):
        monkeypatch.setenv("LOGSIGHT_EXPORT_FORMAT", "csv")
        config_path = tmp_path / "empty.json"
        config_path.write_text("{}")
        output = tmp_path / "result"
        result = runner.invoke(app, ["--config", str(config_path), "analyze", str(sample_log_path), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "result.csv").exists()
        assert (tmp_path / "result_rounds.csv").exists()

"""Tests for the command line interface."""

from pathlib import Path

import yaml
from typer.testing import CliRunner

from swipe_typer.cli import app

runner = CliRunner()

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


class TestReplay:
    def test_replay_prints_words(self):
        result = runner.invoke(app, ["replay", str(EXAMPLES / "hello.yml")])
        assert result.exit_code == 0
        assert "HELLO" in result.output
        assert "1 word(s)" in result.output

    def test_replay_verbose_lists_letters(self):
        result = runner.invoke(app, ["replay", str(EXAMPLES / "sharp_turns.yml"), "-v"])
        assert result.exit_code == 0
        assert "(turn)" in result.output
        assert "TOP" in result.output

    def test_replay_with_config(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("engine:\n  smart_detection: false\n")
        result = runner.invoke(app, ["replay", str(EXAMPLES / "hello.yml"), "--config", str(config), "-v"])
        assert result.exit_code == 0
        assert "(enter)" in result.output

    def test_missing_script(self):
        result = runner.invoke(app, ["replay", "/nonexistent/script.yml"])
        assert result.exit_code == 1

    def test_invalid_script(self, tmp_path):
        script = tmp_path / "bad.yml"
        script.write_text("tiles: [A]\nsteps:\n  - {at: 0, action: wiggle}\n")
        result = runner.invoke(app, ["replay", str(script)])
        assert result.exit_code == 1

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("dwell_duration: -1\n")
        result = runner.invoke(app, ["replay", str(EXAMPLES / "hello.yml"), "--config", str(config)])
        assert result.exit_code == 1


class TestMetricsCommand:
    def test_prints_exposition(self):
        result = runner.invoke(app, ["metrics", str(EXAMPLES / "hello.yml")])
        assert result.exit_code == 0
        assert "swipe_typer_words_total 1" in result.output
        assert 'swipe_typer_letters_total{trigger="dwell"} 4' in result.output


class TestBenchmark:
    def test_small_run(self):
        result = runner.invoke(app, ["benchmark", "--iterations", "3", "--samples", "10"])
        assert result.exit_code == 0
        assert "move" in result.output
        assert "Letters emitted" in result.output


class TestConfigCommand:
    def test_prints_defaults(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["engine"]["dwell_duration"] == 0.42

    def test_writes_file(self, tmp_path):
        out = tmp_path / "defaults.yml"
        result = runner.invoke(app, ["config", "-o", str(out)])
        assert result.exit_code == 0
        assert yaml.safe_load(out.read_text())["engine"]["max_trail_points"] == 69

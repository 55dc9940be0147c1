"""Tests for CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from focusvoid.cli import app

runner = CliRunner()

HUNDRED_WORDS = " ".join(["word"] * 100)


@pytest.fixture(autouse=True)
def _use_tmp_config(tmp_path: Path):
    """Redirect all CLI tests to a temporary config directory."""
    cfg_dir = tmp_path / "config"
    with patch("focusvoid.config._CONFIG_DIR", cfg_dir), patch(
        "focusvoid.config._CONFIG_FILE", cfg_dir / "config.json"
    ):
        yield


class TestWrite:
    def test_finish_after_target(self) -> None:
        result = runner.invoke(
            app, ["write", "Essay", "--words", "100"], input=f"{HUNDRED_WORDS}\n/done\n"
        )
        assert result.exit_code == 0
        assert "You did it." in result.output
        assert "100 words written" in result.output

    def test_done_refused_before_target(self) -> None:
        result = runner.invoke(
            app, ["write", "Essay", "--words", "100"], input="just a few words\n/done\n"
        )
        assert result.exit_code == 1
        assert "Not yet" in result.output
        assert "Session abandoned" in result.output

    def test_peek_before_target(self) -> None:
        result = runner.invoke(app, ["write", "Essay", "--words", "100"], input="/peek\n")
        assert "Nothing to see yet" in result.output

    def test_output_file(self, tmp_path: Path) -> None:
        out = tmp_path / "draft.txt"
        result = runner.invoke(
            app,
            ["write", "Essay", "--words", "100", "--output", str(out)],
            input=f"{HUNDRED_WORDS}\nand more\n/done\n",
        )
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == f"{HUNDRED_WORDS}\nand more"

    def test_both_targets_rejected(self) -> None:
        result = runner.invoke(app, ["write", "Essay", "--words", "100", "--minutes", "10"])
        assert result.exit_code == 1
        assert "not both" in result.output

    def test_word_target_out_of_range(self) -> None:
        result = runner.invoke(app, ["write", "Essay", "--words", "50"])
        assert result.exit_code == 1
        assert "between 100 and 2000" in result.output

    def test_minute_target_out_of_range(self) -> None:
        result = runner.invoke(app, ["write", "Essay", "--minutes", "500"])
        assert result.exit_code == 1

    def test_blank_commitment(self) -> None:
        result = runner.invoke(app, ["write", "   "])
        assert result.exit_code == 1
        assert "Name your commitment first" in result.output


class TestConfig:
    def test_show_defaults(self) -> None:
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "Mode: words" in result.output
        assert "Word target: 500" in result.output
        assert "Time target: 30 min" in result.output

    def test_no_options(self) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "--show" in result.output

    def test_set_and_show(self) -> None:
        result = runner.invoke(app, ["config", "--mode", "time", "--minutes", "45"])
        assert result.exit_code == 0
        assert "New sessions will track time." in result.output
        assert "Default time target set to 45 min." in result.output

        shown = runner.invoke(app, ["config", "--show"])
        assert "Mode: time" in shown.output
        assert "Time target: 45 min" in shown.output

    def test_set_words(self) -> None:
        result = runner.invoke(app, ["config", "--words", "800"])
        assert "Default word target set to 800." in result.output

    def test_unknown_mode(self) -> None:
        result = runner.invoke(app, ["config", "--mode", "pages"])
        assert result.exit_code == 1
        assert "Unknown mode" in result.output

    def test_out_of_range(self) -> None:
        result = runner.invoke(app, ["config", "--words", "5"])
        assert result.exit_code == 1
        assert "Targets must be" in result.output

    def test_reset(self) -> None:
        runner.invoke(app, ["config", "--words", "800"])
        result = runner.invoke(app, ["config", "--reset"])
        assert "Reset to default targets." in result.output
        shown = runner.invoke(app, ["config", "--show"])
        assert "Word target: 500" in shown.output


class TestDefaultsFlowIntoWrite:
    def test_configured_word_target_used(self) -> None:
        runner.invoke(app, ["config", "--words", "100"])
        result = runner.invoke(app, ["write", "Essay"], input=f"{HUNDRED_WORDS}\n/done\n")
        assert result.exit_code == 0
        assert "You did it." in result.output
